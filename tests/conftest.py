from typing import Any, Callable, Dict, List, Optional

import pytest

from scrollex.core.config import ExtractConfig
from scrollex.core.errors import ClientError

Hit = Dict[str, Any]


def sample_hits(count: int, prefix: str = "doc", start: int = 0) -> List[Hit]:
    """Return `count` raw hits shaped like Elasticsearch search results."""
    return [
        {
            "_index": "docs",
            "_id": f"{prefix}-{i}",
            "_score": None,
            "_source": {"n": i, "name": f"{prefix} {i}", "tags": {"lang": "en"}},
        }
        for i in range(start, start + count)
    ]


class FakeClient:
    """
    In-memory SearchClient. `pages` maps a query string (None for match-all)
    to the list of pages the cluster would return for it, in order.
    """

    def __init__(self, pages: Dict[Optional[str], List[List[Hit]]], fail_on: Optional[str] = None):
        self.pages = pages
        self.fail_on = fail_on
        self.calls: List[tuple] = []
        self.closed = False
        self._streams: Dict[str, List[List[Hit]]] = {}
        self._seq = 0

    def _cursor(self, remaining: List[List[Hit]]) -> str:
        self._seq += 1
        cursor = f"cursor-{self._seq}"
        self._streams[cursor] = remaining
        return cursor

    def search(self, options: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("search", options))
        query = options["body"].get("query", {}).get("query_string", {}).get("query")
        if self.fail_on is not None and query == self.fail_on:
            raise ClientError(f"search on {query!r} failed")
        pages = list(self.pages.get(query, []))
        first = pages[0] if pages else []
        return {"_scroll_id": self._cursor(pages[1:]), "hits": {"hits": first}}

    def scroll(self, scroll_id: str, scroll: str) -> Dict[str, Any]:
        self.calls.append(("scroll", scroll_id, scroll))
        remaining = self._streams.pop(scroll_id)
        page = remaining[0] if remaining else []
        return {"_scroll_id": self._cursor(remaining[1:]), "hits": {"hits": page}}

    def close(self) -> None:
        self.closed = True

    @property
    def search_calls(self) -> List[tuple]:
        return [c for c in self.calls if c[0] == "search"]

    @property
    def scroll_calls(self) -> List[tuple]:
        return [c for c in self.calls if c[0] == "scroll"]


class FakeCluster:
    """Client factory handing every worker its own FakeClient over shared pages."""

    def __init__(self, pages: Dict[Optional[str], List[List[Hit]]], fail_on: Optional[str] = None):
        self.pages = pages
        self.fail_on = fail_on
        self.clients: List[FakeClient] = []

    def factory(self, conn: Any) -> FakeClient:
        client = FakeClient(self.pages, fail_on=self.fail_on)
        self.clients.append(client)
        return client


BASE_CONFIG: Dict[str, Any] = {
    "nodes": [{"host": "localhost", "port": 9200}],
    "index": "docs",
    "queries": ["a"],
    "fields": [
        {"name": "_id", "type": "string", "metadata": True},
        {"name": "n", "type": "long"},
        {"name": "name", "type": "string"},
    ],
}


@pytest.fixture
def make_config() -> Callable[..., ExtractConfig]:
    """Build a validated ExtractConfig from BASE_CONFIG plus overrides."""

    def _make(**overrides: Any) -> ExtractConfig:
        raw = dict(BASE_CONFIG)
        raw.update(overrides)
        return ExtractConfig.from_dict(raw)

    return _make


@pytest.fixture
def hits() -> Callable[..., List[Hit]]:
    return sample_hits


@pytest.fixture
def cluster_factory() -> Callable[..., FakeCluster]:
    return FakeCluster
