# scrollex/core/partition.py
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .errors import ConfigurationError

QueryPartition = Tuple[Optional[str], ...]


def partition_queries(queries: Sequence[Optional[str]], worker_count: int) -> List[QueryPartition]:
    """
    Split queries into `worker_count` contiguous, order-preserving slices.
    The first len(queries) % worker_count slices get one extra query, so sizes
    differ by at most one. Workers beyond the query count get empty slices.
    """
    if worker_count < 1:
        raise ConfigurationError(f"worker count must be >= 1, got {worker_count}")

    base, extra = divmod(len(queries), worker_count)
    out: List[QueryPartition] = []
    start = 0
    for i in range(worker_count):
        size = base + (1 if i < extra else 0)
        out.append(tuple(queries[start : start + size]))
        start += size
    return out


__all__ = ["QueryPartition", "partition_queries"]
