# scrollex/extractors/elasticsearch/shaper.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from scrollex.core.coercion import coerce
from scrollex.core.errors import CoercionError
from scrollex.core.extractor_base import Record
from scrollex.core.schema import OutputSchema

_MISSING = object()


class RecordShaper:
    """
    Turns one raw hit into a record aligned with the output schema.

    Field-select mode reads body fields from `_source` and metadata fields
    (`_id`, `_index`, `_score`, ...) from the hit envelope. Passthrough mode
    emits `_id` and the whole `_source` document. When the schema carries the
    query column, the originating query string is appended last.
    """

    def __init__(self, schema: OutputSchema) -> None:
        self.schema = schema

    def shape(self, hit: Mapping[str, Any], query: Optional[str]) -> Record:
        if self.schema.passthrough:
            envelope: Dict[str, Any] = {"_id": hit.get("_id"), "_source": hit.get("_source")}
            values = [envelope.get(f.name) for f in self.schema.fields]
        else:
            body = hit.get("_source") or {}
            values = [
                hit.get(f.name) if f.is_metadata else _lookup(body, f.name)
                for f in self.schema.fields
            ]

        record: Record = []
        for spec, raw in zip(self.schema.fields, values):
            try:
                record.append(coerce(raw, spec.type))
            except CoercionError as exc:
                reason = f"field '{spec.name}'"
                if exc.reason:
                    reason = f"{reason}: {exc.reason}"
                raise CoercionError(raw, spec.type.value, reason) from exc

        if self.schema.add_query:
            record.append(query)
        return record


def _lookup(body: Mapping[str, Any], name: str) -> Any:
    """Flat key first; then `a.b` as a nested path, as returned for `includes` projections."""
    if name in body:
        return body[name]
    if "." not in name:
        return None
    node: Any = body
    for part in name.split("."):
        if not isinstance(node, Mapping):
            return None
        node = node.get(part, _MISSING)
        if node is _MISSING:
            return None
    return node


__all__ = ["RecordShaper"]
