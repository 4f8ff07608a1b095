# scrollex/core/errors.py
from __future__ import annotations

from typing import Any


class ScrollexError(Exception):
    """Base class for every error raised by scrollex."""


class ConfigurationError(ScrollexError):
    """Invalid or missing configuration option. Raised before any network call."""


class UnsupportedTypeError(ScrollexError):
    """A declared field type is not one of the supported column types."""

    def __init__(self, type_name: Any) -> None:
        super().__init__(f"Unsupported type {type_name!r}")
        self.type_name = type_name


class CoercionError(ScrollexError):
    """A raw JSON value cannot be converted to its declared column type."""

    def __init__(self, value: Any, type_name: str, reason: str | None = None) -> None:
        msg = f"Cannot convert {value!r} to {type_name}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.value = value
        self.type_name = type_name
        self.reason = reason


class ClientError(ScrollexError):
    """Network or cluster failure surfaced by the search client."""


__all__ = [
    "ScrollexError",
    "ConfigurationError",
    "UnsupportedTypeError",
    "CoercionError",
    "ClientError",
]
