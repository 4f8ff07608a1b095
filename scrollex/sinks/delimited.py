# scrollex/sinks/delimited.py
from __future__ import annotations

import csv
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import IO, Any, List, Optional

from scrollex.core.extractor_base import Record
from scrollex.core.registry import register_sink
from scrollex.core.schema import FieldType, OutputSchema
from scrollex.core.sink_base import RecordSink, SinkManifest


def _cell(value: Any, ftype: FieldType) -> str:
    if value is None:
        return ""
    if ftype is FieldType.JSON:
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


@register_sink("csv")
class CsvSink(RecordSink):
    """CSV with a header row of column names. Nulls are written as empty cells."""

    def __init__(
        self, schema: OutputSchema, path: Optional[str | Path] = None, delimiter: str = ","
    ) -> None:
        super().__init__(schema)
        self.path = Path(path) if path is not None else None
        self.delimiter = delimiter
        self._fh: Optional[IO[str]] = None
        self._writer: Any = None

    def open(self) -> None:
        if self.path is None:
            self._fh = sys.stdout
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("w", encoding="utf-8", newline="")
        self._writer = csv.writer(self._fh, delimiter=self.delimiter)
        self._writer.writerow(self.schema.columns)

    def _write(self, record: Record) -> None:
        assert self._writer, "Sink not opened. Call .open() first."
        row: List[str] = [_cell(v, t) for v, t in zip(record, self.schema.column_types)]
        self._writer.writerow(row)

    def finalize(self) -> SinkManifest:
        if self._fh:
            self._fh.flush()
        return SinkManifest(
            target=str(self.path) if self.path else "<stdout>",
            total_records=self.total_records,
        )

    def close(self) -> None:
        if self._fh and self._fh is not sys.stdout:
            self._fh.close()
        self._fh = None
        self._writer = None


__all__ = ["CsvSink"]
