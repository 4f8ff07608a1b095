# scrollex/core/schema.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from .config import ExtractConfig
from .errors import UnsupportedTypeError

QUERY_COLUMN = "query"


class FieldType(str, Enum):
    """Closed set of column types a field may be declared with."""

    STRING = "string"
    LONG = "long"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    JSON = "json"

    @classmethod
    def parse(cls, value: Any) -> "FieldType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedTypeError(value) from None


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: FieldType
    is_metadata: bool = False


@dataclass(frozen=True)
class SourceProjection:
    """
    Which parts of each stored document the cluster returns.
    - explicit: includes/excludes are forwarded verbatim in the request body
    - field list: names of the non-metadata fields, sent as the `_source` parameter
    """

    includes: Optional[Tuple[str, ...]] = None
    excludes: Optional[Tuple[str, ...]] = None
    field_names: Optional[Tuple[str, ...]] = None

    @property
    def explicit(self) -> bool:
        return self.field_names is None


@dataclass(frozen=True)
class OutputSchema:
    """
    Ordered output columns. Column order is fixed for the whole run and identical
    for every worker; `query` is appended when records are tagged with their query.
    """

    fields: Tuple[FieldSpec, ...]
    add_query: bool = False
    passthrough: bool = False

    @property
    def columns(self) -> Tuple[str, ...]:
        names = tuple(f.name for f in self.fields)
        return names + (QUERY_COLUMN,) if self.add_query else names

    @property
    def column_types(self) -> Tuple[FieldType, ...]:
        types = tuple(f.type for f in self.fields)
        return types + (FieldType.STRING,) if self.add_query else types

    def __len__(self) -> int:
        return len(self.fields) + (1 if self.add_query else 0)


PASSTHROUGH_FIELDS = (
    FieldSpec("_id", FieldType.STRING, is_metadata=True),
    FieldSpec("_source", FieldType.JSON),
)


def build_schema(cfg: ExtractConfig) -> OutputSchema:
    """Derive the output schema. Unknown field types fail here, before any request."""
    if cfg.passthrough:
        fields = PASSTHROUGH_FIELDS
    else:
        fields = tuple(
            FieldSpec(name=f.name, type=FieldType.parse(f.type), is_metadata=f.metadata)
            for f in cfg.fields
        )
    return OutputSchema(fields=fields, add_query=cfg.add_query_to_record, passthrough=cfg.passthrough)


def build_projection(cfg: ExtractConfig, schema: OutputSchema) -> SourceProjection:
    if cfg.passthrough:
        assert cfg.source_as_json is not None
        return SourceProjection(
            includes=cfg.source_as_json.includes, excludes=cfg.source_as_json.excludes
        )
    return SourceProjection(
        field_names=tuple(f.name for f in schema.fields if not f.is_metadata)
    )


__all__ = [
    "FieldType",
    "FieldSpec",
    "SourceProjection",
    "OutputSchema",
    "QUERY_COLUMN",
    "PASSTHROUGH_FIELDS",
    "build_schema",
    "build_projection",
]
