# scrollex/extractors/elasticsearch/client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Protocol
from urllib.parse import quote

from elastic_transport import SniffingError
from elasticsearch import ApiError, Elasticsearch, TransportError

from scrollex.core.config import ConnectionConfig
from scrollex.core.errors import ClientError

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"accept": "application/json", "content-type": "application/json"}


class SearchClient(Protocol):
    """What the pagination driver needs from a cluster connection."""

    def search(self, options: Mapping[str, Any]) -> Dict[str, Any]: ...

    def scroll(self, scroll_id: str, scroll: str) -> Dict[str, Any]: ...

    def close(self) -> None: ...


class ElasticsearchClient:
    """
    SearchClient backed by the official client. Retries and node sniffing are
    configured on the underlying Elasticsearch instance; every failure that
    survives them is raised as ClientError.
    """

    def __init__(self, es: Elasticsearch) -> None:
        self._es = es

    def search(self, options: Mapping[str, Any]) -> Dict[str, Any]:
        index = quote(options["index"], safe=",*")
        doc_type = options.get("type")
        path = f"/{index}/{quote(doc_type)}/_search" if doc_type else f"/{index}/_search"

        params: Dict[str, Any] = {"scroll": options["scroll"], "size": str(options["size"])}
        if "_source" in options:
            source = options["_source"]
            params["_source"] = "false" if source is False else source

        try:
            resp = self._es.perform_request(
                "POST", path, params=params, headers=_JSON_HEADERS, body=options["body"]
            )
        except (ApiError, TransportError) as exc:
            raise ClientError(f"search on {options['index']!r} failed: {exc}") from exc
        return _body(resp)

    def scroll(self, scroll_id: str, scroll: str) -> Dict[str, Any]:
        try:
            resp = self._es.scroll(scroll_id=scroll_id, scroll=scroll)
        except (ApiError, TransportError) as exc:
            raise ClientError(f"scroll failed: {exc}") from exc
        return _body(resp)

    def close(self) -> None:
        self._es.close()


def create_client(conn: ConnectionConfig) -> ElasticsearchClient:
    """
    One client per worker; connections are never shared between workers.
    Sniffing on start contacts the cluster here, so an unreachable cluster or a
    malformed node URL already fails as ClientError.
    """
    logger.debug("connecting to %s", ", ".join(conn.nodes))
    try:
        es = Elasticsearch(
            hosts=list(conn.nodes),
            request_timeout=conn.request_timeout,
            max_retries=conn.retry_on_failure,
            retry_on_timeout=conn.retry_on_failure > 0,
            sniff_on_start=conn.reload_connections,
            sniff_on_node_failure=conn.reload_on_failure,
        )
    except (ApiError, TransportError, SniffingError, ValueError) as exc:
        raise ClientError(f"cannot connect to {', '.join(conn.nodes)}: {exc}") from exc
    return ElasticsearchClient(es)


def _body(resp: Any) -> Dict[str, Any]:
    # ObjectApiResponse exposes the decoded JSON as .body
    return getattr(resp, "body", resp)


__all__ = ["SearchClient", "ElasticsearchClient", "create_client"]
