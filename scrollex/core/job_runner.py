# scrollex/core/job_runner.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .config import ExtractConfig
from .extractor_base import ExtractorFactory
from .partition import QueryPartition, partition_queries
from .sink_base import RecordSink, SinkManifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkerReport:
    worker: int
    queries: int
    records: int


@dataclass(frozen=True)
class RunReport:
    workers: Tuple[WorkerReport, ...]
    manifest: SinkManifest

    @property
    def total_records(self) -> int:
        return sum(w.records for w in self.workers)


class JobRunner:
    """
    Orchestrates one extraction run:
      - split the queries into one partition per worker
      - run one extractor per partition on a thread pool, each built by
        `extractor_factory` from its queries
      - hand every record to the sink, then finalize it once all workers are done
    The first worker failure aborts the run: the other workers stop before
    emitting further records, the sink is closed without finalize, and the
    error is re-raised.
    """

    def __init__(
        self,
        cfg: ExtractConfig,
        extractor_factory: ExtractorFactory,
    ) -> None:
        self.cfg = cfg
        self.extractor_factory = extractor_factory
        self._abort = threading.Event()

    # ---------------------- public entry points ----------------------

    def run(self, sink: RecordSink) -> RunReport:
        """Pipeline: queries -> [workers] -> sink (produce manifest)."""
        self._abort.clear()
        partitions = partition_queries(self.cfg.queries, self.cfg.threading.num_threads)
        logger.info(
            "extracting %d queries from %r with %d worker(s)",
            len(self.cfg.queries),
            self.cfg.index,
            len(partitions),
        )
        sink.open()
        try:
            reports = self._run_partitions_parallel(partitions, sink)
            manifest = sink.finalize()
            report = RunReport(workers=tuple(reports), manifest=manifest)
            logger.info("extracted %d records", report.total_records)
            return report
        finally:
            sink.close()

    # ---------------------- internals ----------------------

    def _run_partitions_parallel(
        self, partitions: Sequence[QueryPartition], sink: RecordSink
    ) -> List[WorkerReport]:
        reports: Dict[int, WorkerReport] = {}
        with ThreadPoolExecutor(max_workers=max(1, len(partitions))) as pool:
            futures: Dict[Future[WorkerReport], int] = {
                pool.submit(self._run_worker, i, queries, sink): i
                for i, queries in enumerate(partitions)
            }
            for fut in as_completed(futures):
                worker = futures[fut]
                try:
                    reports[worker] = fut.result()
                except Exception:
                    logger.error("worker %d failed, aborting run", worker)
                    self._abort.set()
                    raise
        return [reports[i] for i in sorted(reports)]

    def _run_worker(
        self, worker: int, queries: QueryPartition, sink: RecordSink
    ) -> WorkerReport:
        if not queries:
            return WorkerReport(worker=worker, queries=0, records=0)

        logger.info("worker %d queries => %s", worker, list(queries))
        extractor = self.extractor_factory(queries)
        extractor.open()
        records = 0
        try:
            for rec in extractor.iter_records():
                if self._abort.is_set():
                    logger.info("worker %d stopping: run aborted", worker)
                    break
                sink.append(rec)
                records += 1
        finally:
            extractor.close()
        return WorkerReport(worker=worker, queries=len(queries), records=records)


__all__ = ["JobRunner", "RunReport", "WorkerReport"]
