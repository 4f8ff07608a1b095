# scrollex/core/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError

DEFAULT_PORT = 9200
DEFAULT_SCHEME = "http"


@dataclass(frozen=True)
class ConnectionConfig:
    """How each worker reaches the cluster. Consumed only by the client factory."""

    nodes: Tuple[str, ...]
    request_timeout: int = 60
    reload_connections: bool = True  # sniff the cluster on start
    reload_on_failure: bool = False  # sniff again when a node fails
    retry_on_failure: int = 5  # max retries per request


@dataclass(frozen=True)
class ThreadingConfig:
    """Parallelism knobs for the runner."""

    num_threads: int = 1  # one worker per query partition


@dataclass(frozen=True)
class FieldConfig:
    """One entry of the `fields` option, type still unvalidated."""

    name: str
    type: str
    metadata: bool = False


@dataclass(frozen=True)
class SourceAsJsonConfig:
    """Passthrough mode: emit `_id` and the whole `_source` instead of per-field columns."""

    fetch: bool = True
    includes: Optional[Tuple[str, ...]] = None
    excludes: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class ExtractConfig:
    """
    Validated extraction job. Built once at startup through from_dict()/load_config()
    and shared read-only by every worker.
    """

    connection: ConnectionConfig
    index: str
    queries: Tuple[Optional[str], ...]
    fields: Tuple[FieldConfig, ...] = ()
    index_type: Optional[str] = None
    sort: Optional[Tuple[Tuple[str, Any], ...]] = None
    per_size: int = 1000
    limit_size: Optional[int] = None
    scroll: str = "1m"
    add_query_to_record: bool = False
    source_as_json: Optional[SourceAsJsonConfig] = None
    threading: ThreadingConfig = field(default_factory=ThreadingConfig)

    @property
    def passthrough(self) -> bool:
        return self.source_as_json is not None and self.source_as_json.fetch

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ExtractConfig":
        if not isinstance(raw, Mapping):
            raise ConfigurationError("configuration must be a mapping")

        connection = ConnectionConfig(
            nodes=_parse_nodes(_required(raw, "nodes")),
            request_timeout=_int(raw, "request_timeout", 60, minimum=1),
            reload_connections=_bool(raw, "reload_connections", True),
            reload_on_failure=_bool(raw, "reload_on_failure", False),
            retry_on_failure=_int(raw, "retry_on_failure", 5, minimum=0),
        )

        index = _required(raw, "index")
        if not isinstance(index, str) or not index:
            raise ConfigurationError("'index' must be a non-empty string")

        index_type = raw.get("index_type")
        if index_type is not None and not isinstance(index_type, str):
            raise ConfigurationError("'index_type' must be a string")

        source_as_json = _parse_source_as_json(raw.get("source_as_json"))
        passthrough = source_as_json is not None and source_as_json.fetch
        fields = () if passthrough else _parse_fields(raw.get("fields"))

        limit_size = raw.get("limit_size")
        if limit_size is not None:
            limit_size = _int(raw, "limit_size", None, minimum=1)

        scroll = raw.get("scroll", "1m")
        if not isinstance(scroll, str) or not scroll:
            raise ConfigurationError("'scroll' must be a time value such as '1m'")

        return cls(
            connection=connection,
            index=index,
            index_type=index_type,
            queries=_parse_queries(_required(raw, "queries")),
            fields=fields,
            sort=_parse_sort(raw.get("sort")),
            per_size=_int(raw, "per_size", 1000, minimum=1),
            limit_size=limit_size,
            scroll=scroll,
            add_query_to_record=_bool(raw, "add_query_to_record", False),
            source_as_json=source_as_json,
            threading=ThreadingConfig(num_threads=_int(raw, "num_threads", 1, minimum=1)),
        )


def load_config(path: str | Path) -> ExtractConfig:
    """
    Read a YAML job file. The options may sit at the top level or under an
    Embulk-style `in:` section.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = yaml.safe_load(fh) or {}
    except OSError as exc:
        raise ConfigurationError(f"cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid YAML in {path}: {exc}") from exc

    if isinstance(payload, Mapping) and isinstance(payload.get("in"), Mapping):
        payload = payload["in"]
    return ExtractConfig.from_dict(payload)


# ------------ helpers ------------


def _required(raw: Mapping[str, Any], key: str) -> Any:
    if raw.get(key) is None:
        raise ConfigurationError(f"missing required option '{key}'")
    return raw[key]


def _int(raw: Mapping[str, Any], key: str, default: Any, minimum: int) -> Any:
    value = raw.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"'{key}' must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"'{key}' must be >= {minimum}, got {value}")
    return value


def _bool(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"'{key}' must be a boolean, got {value!r}")
    return value


def _parse_nodes(nodes: Any) -> Tuple[str, ...]:
    if not isinstance(nodes, list) or not nodes:
        raise ConfigurationError("'nodes' must be a non-empty list")
    out = []
    for node in nodes:
        if isinstance(node, str) and node:
            out.append(node)
        elif isinstance(node, Mapping) and node.get("host"):
            scheme = node.get("scheme", DEFAULT_SCHEME)
            port = node.get("port", DEFAULT_PORT)
            out.append(f"{scheme}://{node['host']}:{port}")
        else:
            raise ConfigurationError(f"invalid node entry {node!r}")
    return tuple(out)


def _parse_queries(queries: Any) -> Tuple[Optional[str], ...]:
    if not isinstance(queries, list) or not queries:
        raise ConfigurationError("'queries' must be a non-empty list")
    for q in queries:
        if q is not None and not isinstance(q, str):
            raise ConfigurationError(f"query must be a string, got {q!r}")
    return tuple(queries)


def _parse_fields(fields: Any) -> Tuple[FieldConfig, ...]:
    if fields is None:
        raise ConfigurationError("missing required option 'fields'")
    if not isinstance(fields, list) or not fields:
        raise ConfigurationError("'fields' must be a non-empty list")
    out = []
    for entry in fields:
        if not isinstance(entry, Mapping) or not entry.get("name") or not entry.get("type"):
            raise ConfigurationError(f"field entry needs 'name' and 'type': {entry!r}")
        out.append(
            FieldConfig(
                name=str(entry["name"]),
                type=str(entry["type"]),
                metadata=bool(entry.get("metadata", False)),
            )
        )
    return tuple(out)


def _parse_sort(sort: Any) -> Optional[Tuple[Tuple[str, Any], ...]]:
    if sort is None:
        return None
    if not isinstance(sort, Mapping) or not sort:
        raise ConfigurationError("'sort' must be a mapping of field to direction")
    return tuple((str(k), v) for k, v in sort.items())


def _parse_source_as_json(raw: Any) -> Optional[SourceAsJsonConfig]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ConfigurationError("'source_as_json' must be a mapping")

    def paths(key: str) -> Optional[Tuple[str, ...]]:
        value = raw.get(key)
        if value is None:
            return None
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(f"'source_as_json.{key}' must be a list of field paths")
        return tuple(value)

    return SourceAsJsonConfig(
        fetch=_bool(raw, "fetch", True),
        includes=paths("includes"),
        excludes=paths("excludes"),
    )


__all__ = [
    "ConnectionConfig",
    "ThreadingConfig",
    "FieldConfig",
    "SourceAsJsonConfig",
    "ExtractConfig",
    "load_config",
]
