# scrollex/core/registry.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterator, Optional, Type, TypeVar

from .errors import ConfigurationError
from .schema import OutputSchema
from .sink_base import RecordSink

S = TypeVar("S", bound=Type[RecordSink])


class SinkRegistry:
    """
    Output formats selectable by name on the command line (`--sink csv`).
    File sinks register themselves at import time:
        @register_sink("jsonl")
        class JsonlSink(RecordSink): ...
    Every registered sink is constructed as `cls(schema, path)`.
    """

    def __init__(self) -> None:
        self._sinks: Dict[str, Type[RecordSink]] = {}

    def add(self, name: str, sink_cls: Type[RecordSink]) -> None:
        key = name.lower()
        existing = self._sinks.get(key)
        if existing is not None and existing is not sink_cls:
            raise ValueError(f"sink '{name}' is already bound to {existing.__name__}")
        self._sinks[key] = sink_cls

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._sinks

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._sinks))

    def lookup(self, name: str) -> Type[RecordSink]:
        try:
            return self._sinks[name.lower()]
        except KeyError:
            known = ", ".join(self) or "none"
            raise ConfigurationError(f"unknown sink '{name}' (known: {known})") from None

    def build(
        self, name: str, schema: OutputSchema, path: Optional[str | Path] = None
    ) -> RecordSink:
        return self.lookup(name)(schema, path)


sinks = SinkRegistry()


def register_sink(name: str) -> Callable[[S], S]:
    def deco(cls: S) -> S:
        sinks.add(name, cls)
        return cls

    return deco


__all__ = ["SinkRegistry", "sinks", "register_sink"]
