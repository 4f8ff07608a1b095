# scrollex/core/extractor_base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator, List, Optional, Sequence

from .base_stage import Stage

Record = List[Any]  # typed values aligned with OutputSchema.columns
Batch = List[Record]


class Extractor(Stage, ABC):
    """
    Abstract base for extractors. Subclasses must implement iter_records().
    An extractor reads from one source and yields shaped records in source order.
    """

    @abstractmethod
    def iter_records(self) -> Iterator[Record]:
        """Yield one record at a time (streaming, bounded memory)."""
        ...


# builds the extractor of one worker from its partition of queries
ExtractorFactory = Callable[[Sequence[Optional[str]]], Extractor]

__all__ = ["Extractor", "ExtractorFactory", "Record", "Batch"]
