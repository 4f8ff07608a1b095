# scrollex/cli.py
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

# sink modules register themselves on import
import scrollex.sinks.delimited  # noqa: F401
import scrollex.sinks.jsonl  # noqa: F401
from scrollex.core.config import load_config
from scrollex.core.errors import ScrollexError
from scrollex.core.job_runner import JobRunner
from scrollex.core.registry import sinks
from scrollex.core.schema import build_schema
from scrollex.extractors.elasticsearch.extractor import extractor_factory

logger = logging.getLogger("scrollex")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scrollex",
        description="Extract Elasticsearch documents into typed records via search + scroll.",
    )
    parser.add_argument("config", help="YAML job file")
    parser.add_argument(
        "--sink",
        default="jsonl",
        choices=list(sinks),
        help="output format (default: jsonl)",
    )
    parser.add_argument("--output", default=None, help="output file (default: stdout)")
    parser.add_argument("--log-level", default="INFO", help="logging level (default: INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = load_config(args.config)
        schema = build_schema(cfg)
        sink = sinks.build(args.sink, schema, args.output)
        report = JobRunner(cfg, extractor_factory(cfg, schema)).run(sink)
    except ScrollexError as exc:
        logger.error("%s", exc)
        return 1

    logger.info(
        "wrote %d records to %s", report.manifest.total_records, report.manifest.target
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
