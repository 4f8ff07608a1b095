# scrollex/extractors/elasticsearch/extractor.py
from __future__ import annotations

from typing import Callable, Iterator, Optional, Sequence

from scrollex.core.config import ConnectionConfig, ExtractConfig
from scrollex.core.extractor_base import Extractor, ExtractorFactory, Record
from scrollex.core.schema import OutputSchema, build_projection

from .client import SearchClient, create_client
from .driver import ScrollDriver
from .shaper import RecordShaper

ClientFactory = Callable[[ConnectionConfig], SearchClient]


class ElasticsearchExtractor(Extractor):
    """
    Streams shaped records for one partition of queries.
    Uses search + scroll under the hood to avoid deep pagination; owns its own
    client, opened in open() and closed in close().
    """

    def __init__(
        self,
        cfg: ExtractConfig,
        schema: OutputSchema,
        queries: Sequence[Optional[str]],
        client_factory: ClientFactory = create_client,
    ) -> None:
        self.cfg = cfg
        self.schema = schema
        self.queries = tuple(queries)
        self.client_factory = client_factory
        self.client: SearchClient | None = None
        self.driver: ScrollDriver | None = None

    def open(self) -> None:
        """Initialize the cluster client."""
        self.client = self.client_factory(self.cfg.connection)

    def iter_records(self) -> Iterator[Record]:
        assert self.client, "Extractor not opened. Call .open() first."
        self.driver = ScrollDriver(
            client=self.client,
            cfg=self.cfg,
            shaper=RecordShaper(self.schema),
            projection=build_projection(self.cfg, self.schema),
            queries=self.queries,
        )
        yield from self.driver.iter_records()

    def close(self) -> None:
        """Close client."""
        if self.client:
            self.client.close()
            self.client = None


def extractor_factory(
    cfg: ExtractConfig, schema: OutputSchema, client_factory: ClientFactory = create_client
) -> ExtractorFactory:
    """Wire ElasticsearchExtractor into JobRunner: one extractor per query partition."""

    def make(queries: Sequence[Optional[str]]) -> ElasticsearchExtractor:
        return ElasticsearchExtractor(cfg, schema, queries, client_factory)

    return make


__all__ = ["ElasticsearchExtractor", "ClientFactory", "extractor_factory"]
