# scrollex/core/base_stage.py
from __future__ import annotations

from abc import ABC
from types import TracebackType
from typing import Optional, Type, TypeVar

S = TypeVar("S", bound="Stage")


class Stage(ABC):  # noqa: B024
    """
    Lifecycle base shared by extractors and sinks.
    Subclasses override open()/close() when they hold resources (clients, files).
    Usable as a context manager: `with JsonlSink(...) as sink: ...`.
    """

    def open(self) -> None:  # noqa: B027
        """Acquire resources. Called once before the stage is used."""
        pass

    def close(self) -> None:  # noqa: B027
        """Release resources. Called once afterwards, on success or failure."""
        pass

    def __enter__(self: S) -> S:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


__all__ = ["Stage"]
