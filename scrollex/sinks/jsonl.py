# scrollex/sinks/jsonl.py
from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Optional

from scrollex.core.extractor_base import Record
from scrollex.core.registry import register_sink
from scrollex.core.schema import OutputSchema
from scrollex.core.sink_base import RecordSink, SinkManifest


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@register_sink("jsonl")
class JsonlSink(RecordSink):
    """
    One JSON object per line, keys in column order.
    Writes to `path`, or to stdout when no path is given.
    """

    def __init__(self, schema: OutputSchema, path: Optional[str | Path] = None) -> None:
        super().__init__(schema)
        self.path = Path(path) if path is not None else None
        self._fh: Optional[IO[str]] = None

    def open(self) -> None:
        if self.path is None:
            self._fh = sys.stdout
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("w", encoding="utf-8")

    def _write(self, record: Record) -> None:
        assert self._fh, "Sink not opened. Call .open() first."
        row = dict(zip(self.schema.columns, record))
        self._fh.write(json.dumps(row, ensure_ascii=False, default=_json_default))
        self._fh.write("\n")

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


__all__ = ["JsonlSink"]
