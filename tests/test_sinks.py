import csv
import json
import threading
from datetime import datetime, timezone
from pathlib import Path

import pytest

from scrollex.core.errors import ConfigurationError
from scrollex.core.registry import SinkRegistry, sinks
from scrollex.core.schema import FieldSpec, FieldType, OutputSchema
from scrollex.sinks.delimited import CsvSink
from scrollex.sinks.jsonl import JsonlSink
from scrollex.sinks.memory import InMemorySink

SCHEMA = OutputSchema(
    fields=(
        FieldSpec("_id", FieldType.STRING, is_metadata=True),
        FieldSpec("at", FieldType.TIMESTAMP),
        FieldSpec("ok", FieldType.BOOLEAN),
        FieldSpec("doc", FieldType.JSON),
    ),
    add_query=True,
)
AT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_jsonl_sink_writes_one_object_per_line(tmp_path: Path) -> None:
    path = tmp_path / "out" / "records.jsonl"
    with JsonlSink(SCHEMA, path) as sink:
        sink.append(["1", AT, True, {"a": [1]}, "q"])
        sink.append_batch([["2", None, None, None, "q"]])
        manifest = sink.finalize()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0]) == {
        "_id": "1",
        "at": "2024-01-02T03:04:05+00:00",
        "ok": True,
        "doc": {"a": [1]},
        "query": "q",
    }
    assert json.loads(lines[1])["at"] is None
    assert manifest.total_records == 2
    assert manifest.target == str(path)


def test_csv_sink(tmp_path: Path) -> None:
    path = tmp_path / "records.csv"
    with CsvSink(SCHEMA, path) as sink:
        sink.append(["1", AT, False, {"a": 1}, "q"])
        sink.append(["2", None, None, None, None])
        sink.finalize()

    with path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == ["_id", "at", "ok", "doc", "query"]
    assert rows[1] == ["1", "2024-01-02T03:04:05+00:00", "false", '{"a": 1}', "q"]
    assert rows[2] == ["2", "", "", "", ""]


def test_memory_sink_concurrent_appends() -> None:
    sink = InMemorySink(SCHEMA)

    def worker(n: int) -> None:
        for i in range(200):
            sink.append([f"{n}-{i}", None, None, None, None])

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sink.total_records == 800
    assert len({r[0] for r in sink.records}) == 800
    assert sink.as_dicts()[0].keys() == {"_id", "at", "ok", "doc", "query"}


def test_file_sinks_registered() -> None:
    assert {"jsonl", "csv"} <= set(sinks)
    assert "CSV" in sinks
    assert sinks.lookup("JSONL") is JsonlSink


def test_registry_builds_sink_for_path(tmp_path: Path) -> None:
    sink = sinks.build("csv", SCHEMA, tmp_path / "x.csv")
    assert isinstance(sink, CsvSink)
    assert sink.path == tmp_path / "x.csv"


def test_registry_rejects_conflicts_and_unknown_names() -> None:
    registry = SinkRegistry()
    registry.add("x", JsonlSink)
    registry.add("x", JsonlSink)
    with pytest.raises(ValueError, match="already bound to JsonlSink"):
        registry.add("X", CsvSink)
    with pytest.raises(ConfigurationError, match="known: x"):
        registry.lookup("y")
