# scrollex/core/sink_base.py
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .base_stage import Stage
from .extractor_base import Batch, Record
from .schema import OutputSchema


@dataclass(frozen=True)
class SinkManifest:
    """What a sink wrote: destination (None for in-memory) and record count."""

    target: str | None
    total_records: int


class RecordSink(Stage, ABC):
    """
    Receives shaped records from every worker.
    append() may be called concurrently; implementations write under self._lock
    so that records are never interleaved mid-write.
    """

    def __init__(self, schema: OutputSchema) -> None:
        self.schema = schema
        self.total_records = 0
        self._lock = threading.Lock()

    def append(self, record: Record) -> None:
        with self._lock:
            self._write(record)
            self.total_records += 1

    def append_batch(self, batch: Batch) -> None:
        with self._lock:
            for rec in batch:
                self._write(rec)
                self.total_records += 1

    @abstractmethod
    def _write(self, record: Record) -> None:
        """Persist one record. Called with the lock held."""
        ...

    @abstractmethod
    def finalize(self) -> SinkManifest:
        """Flush everything written so far. Only called after a successful run."""
        raise NotImplementedError


__all__ = ["RecordSink", "SinkManifest"]
