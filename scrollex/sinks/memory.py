# scrollex/sinks/memory.py
from __future__ import annotations

from typing import Any, Dict, List

from scrollex.core.extractor_base import Record
from scrollex.core.schema import OutputSchema
from scrollex.core.sink_base import RecordSink, SinkManifest


class InMemorySink(RecordSink):
    """Keeps every record in a list. For tests and embedding in other programs."""

    def __init__(self, schema: OutputSchema) -> None:
        super().__init__(schema)
        self.records: List[Record] = []
        self.finalized = False

    def _write(self, record: Record) -> None:
        self.records.append(list(record))

    def finalize(self) -> SinkManifest:
        self.finalized = True
        return SinkManifest(target=None, total_records=self.total_records)

    def as_dicts(self) -> List[Dict[str, Any]]:
        columns = self.schema.columns
        return [dict(zip(columns, rec)) for rec in self.records]


__all__ = ["InMemorySink"]
