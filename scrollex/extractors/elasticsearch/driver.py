# scrollex/extractors/elasticsearch/driver.py
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterator, List, Mapping, Optional, Sequence

from scrollex.core.config import ExtractConfig
from scrollex.core.extractor_base import Record
from scrollex.core.schema import SourceProjection

from .client import SearchClient
from .request import build_search_options
from .shaper import RecordShaper

logger = logging.getLogger(__name__)


class ScrollState(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    PAGING = "paging"
    DONE = "done"


class ScrollDriver:
    """
    Runs the search -> scroll loop for every query of one worker's partition.

      IDLE      take the next query (none left -> DONE)
      SEARCHING initial search; hits and room under the limit -> PAGING, else IDLE
      PAGING    scroll with the last cursor; empty page or limit reached -> IDLE
      DONE      every query processed

    The per-query limit is a client-side cutoff: once `limit_size` records are
    emitted no further request is made for that query. Client errors propagate.
    State is owned by a single worker and never shared.
    """

    def __init__(
        self,
        client: SearchClient,
        cfg: ExtractConfig,
        shaper: RecordShaper,
        projection: SourceProjection,
        queries: Sequence[Optional[str]],
    ) -> None:
        self.client = client
        self.cfg = cfg
        self.shaper = shaper
        self.projection = projection
        self._pending: List[Optional[str]] = list(queries)
        self.state = ScrollState.IDLE
        self.query: Optional[str] = None
        self.cursor: Optional[str] = None
        self.emitted = 0
        self.total_emitted = 0
        self.queries_done = 0

    def iter_records(self) -> Iterator[Record]:
        while self.state is not ScrollState.DONE:
            if self.state is ScrollState.IDLE:
                self._next_query()
            elif self.state is ScrollState.SEARCHING:
                options = build_search_options(self.cfg, self.projection, self.query)
                logger.debug("search options: %s", options)
                yield from self._consume(self.client.search(options))
            elif self.state is ScrollState.PAGING:
                assert self.cursor, "scroll cursor missing while paging"
                yield from self._consume(self.client.scroll(self.cursor, self.cfg.scroll))

    def _next_query(self) -> None:
        self.cursor = None
        self.emitted = 0
        if not self._pending:
            self.query = None
            self.state = ScrollState.DONE
            return
        self.query = self._pending.pop(0)
        self.state = ScrollState.SEARCHING

    def _finish_query(self) -> None:
        logger.debug("query %r finished with %d records", self.query, self.emitted)
        self.queries_done += 1
        self.cursor = None
        self.state = ScrollState.IDLE

    def _consume(self, response: Mapping[str, Any]) -> Iterator[Record]:
        hits = response.get("hits", {}).get("hits") or []
        if not hits:
            self._finish_query()
            return

        self.cursor = response.get("_scroll_id")
        limit = self.cfg.limit_size
        for hit in hits:
            yield self.shaper.shape(hit, self.query)
            self.emitted += 1
            self.total_emitted += 1
            if limit is not None and self.emitted >= limit:
                self._finish_query()
                return

        if not self.cursor:
            # no cursor to continue from: the response was the whole result
            self._finish_query()
            return
        self.state = ScrollState.PAGING


__all__ = ["ScrollDriver", "ScrollState"]
