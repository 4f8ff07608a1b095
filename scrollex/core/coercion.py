# scrollex/core/coercion.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from dateutil import parser as date_parser

from .errors import CoercionError
from .schema import FieldType

_TRUE = ("true", "1")
_FALSE = ("false", "0")

# fills in parts missing from partial dates; fixed so coerce() stays pure
_DATE_DEFAULT = datetime(1970, 1, 1)


def coerce(raw: Any, declared_type: FieldType | str) -> Any:
    """
    Convert a raw JSON value into the value of its declared column type.
    None passes through for every type. Pure: no state, same input -> same output.
    """
    ftype = FieldType.parse(declared_type)
    if raw is None:
        return None

    if ftype is FieldType.STRING:
        return raw
    if ftype is FieldType.LONG:
        return _to_long(raw)
    if ftype is FieldType.DOUBLE:
        return _to_double(raw)
    if ftype is FieldType.BOOLEAN:
        return _to_boolean(raw)
    if ftype is FieldType.TIMESTAMP:
        return _to_timestamp(raw)
    if ftype is FieldType.JSON:
        return raw
    raise AssertionError(f"unhandled field type {ftype}")  # pragma: no cover


def _to_long(raw: Any) -> int:
    if isinstance(raw, bool):
        raise CoercionError(raw, "long", "booleans are not numbers")
    if isinstance(raw, int):
        return int(raw)
    if isinstance(raw, float):
        if raw != raw or raw in (float("inf"), float("-inf")):
            raise CoercionError(raw, "long", "not a finite number")
        return int(raw)
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            raise CoercionError(raw, "long") from None
    raise CoercionError(raw, "long", f"unexpected {type(raw).__name__}")


def _to_double(raw: Any) -> float:
    if isinstance(raw, bool):
        raise CoercionError(raw, "double", "booleans are not numbers")
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw.strip())
        except ValueError:
            raise CoercionError(raw, "double") from None
    raise CoercionError(raw, "double", f"unexpected {type(raw).__name__}")


def _to_boolean(raw: Any) -> bool | None:
    if isinstance(raw, bool):
        return raw
    text = str(raw).lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    # unrecognized values become null, not an error
    return None


def _to_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = _parse_calendar(raw)
    else:
        raise CoercionError(raw, "timestamp", f"unexpected {type(raw).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_calendar(raw: str) -> datetime:
    """Non-ISO calendar strings: `2024/01/02 03:04:05`, RFC 2822 dates, `Jan 2 2024 3pm`."""
    try:
        return date_parser.parse(raw, default=_DATE_DEFAULT)
    except (ValueError, OverflowError):
        raise CoercionError(raw, "timestamp") from None


__all__ = ["coerce"]
