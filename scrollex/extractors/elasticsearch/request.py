# scrollex/extractors/elasticsearch/request.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from scrollex.core.config import ExtractConfig
from scrollex.core.schema import SourceProjection

DEFAULT_SORT: List[Any] = ["_doc"]


def build_search_options(
    cfg: ExtractConfig, projection: SourceProjection, query: Optional[str]
) -> Dict[str, Any]:
    """
    Options of the initial search request of one query:
      {index, type?, scroll, size, body: {query?, sort, _source?}, _source?}
    An empty or missing query string means match-all (no `query` clause).
    Without a configured sort, `_doc` order is used: cheapest for scrolling.
    """
    body: Dict[str, Any] = {}
    if query:
        body["query"] = {"query_string": {"query": query}}
    if cfg.sort:
        body["sort"] = [{name: direction} for name, direction in cfg.sort]
    else:
        body["sort"] = list(DEFAULT_SORT)

    options: Dict[str, Any] = {
        "index": cfg.index,
        "scroll": cfg.scroll,
        "size": cfg.per_size,
        "body": body,
    }
    if cfg.index_type:
        options["type"] = cfg.index_type

    if projection.explicit:
        source: Dict[str, List[str]] = {}
        if projection.includes is not None:
            source["includes"] = list(projection.includes)
        if projection.excludes is not None:
            source["excludes"] = list(projection.excludes)
        if source:
            body["_source"] = source
    else:
        assert projection.field_names is not None
        options["_source"] = ",".join(projection.field_names) if projection.field_names else False
    return options


__all__ = ["build_search_options", "DEFAULT_SORT"]
