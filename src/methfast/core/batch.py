"""
Order-preserving parallel aggregation over many targets.

Targets are independent: each one is reduced against the shared, read-only
interval table. Work is cut into contiguous chunks and mapped with
``Executor.map`` so results come back in input order no matter which worker
finishes first.
"""

from __future__ import annotations

import os
from concurrent.futures import Executor, ProcessPoolExecutor
from functools import partial
from itertools import chain
from typing import Optional, Sequence

from methfast.core.aggregate import AggregateResult, aggregate_target
from methfast.core.intervals import IntervalTable
from methfast.core.targets import TargetInterval
from methfast.exceptions import ConfigurationError
from methfast.utils.logging import LogTemplates, get_logger
from methfast.utils.progress import iter_progress

logger = get_logger("batch")

DEFAULT_CHUNKSIZE = 2048

# Table installed in each worker process by the pool initializer
_table: Optional[IntervalTable] = None


def _init_worker(table: IntervalTable) -> None:
    """Initialize the shared table in a worker process."""
    global _table
    _table = table


def aggregate_chunk(table: IntervalTable, targets: Sequence[TargetInterval]) -> list[AggregateResult]:
    """Aggregate a contiguous run of targets against ``table``."""
    return [aggregate_target(table, target) for target in targets]


def _aggregate_chunk_shared(targets: Sequence[TargetInterval]) -> list[AggregateResult]:
    if _table is None:
        raise RuntimeError("Batch worker not initialized (interval table is None)")
    return aggregate_chunk(_table, targets)


def resolve_workers(workers: Optional[int]) -> int:
    """Return the worker count to use; ``None`` or 0 means one per CPU."""
    if workers is None or workers == 0:
        return os.cpu_count() or 1
    if workers < 0:
        raise ConfigurationError(f"Worker count must be >= 0, got {workers}")
    return workers


def chunk_targets(
    targets: Sequence[TargetInterval], chunksize: int
) -> list[Sequence[TargetInterval]]:
    """Split targets into contiguous chunks of at most ``chunksize``."""
    if chunksize < 1:
        raise ConfigurationError(f"Chunk size must be >= 1, got {chunksize}")
    return [targets[i : i + chunksize] for i in range(0, len(targets), chunksize)]


def run_batch(
    table: IntervalTable,
    targets: Sequence[TargetInterval],
    *,
    workers: Optional[int] = 0,
    executor: Optional[Executor] = None,
    chunksize: int = DEFAULT_CHUNKSIZE,
    progress: bool = False,
) -> list[AggregateResult]:
    """
    Aggregate every target, returning results in target order.

    Args:
        table: Interval table shared read-only by all tasks
        targets: Targets in output order
        workers: Worker processes for this call (0/None: one per CPU)
        executor: Externally owned executor to run chunks on; when given,
            ``workers`` is ignored and the table is sent with every chunk
        chunksize: Targets per task
        progress: Show a progress bar over completed chunks

    Returns:
        One AggregateResult per target, aligned with ``targets``
    """
    chunks = chunk_targets(targets, chunksize)

    if executor is not None:
        logger.info(
            f"Aggregating {len(targets):,} targets on {type(executor).__name__} "
            f"in {len(chunks):,} chunk(s)"
        )
        mapped = executor.map(partial(aggregate_chunk, table), chunks)
        return _collect(mapped, len(targets), len(chunks), progress)

    n_workers = min(resolve_workers(workers), max(len(chunks), 1))
    logger.info(
        LogTemplates.BATCH_START.format(count=len(targets), workers=n_workers, chunks=len(chunks))
    )

    if n_workers <= 1:
        mapped = map(partial(aggregate_chunk, table), chunks)
        return _collect(mapped, len(targets), len(chunks), progress)

    with ProcessPoolExecutor(
        max_workers=n_workers,
        initializer=_init_worker,
        initargs=(table,),
    ) as pool:
        mapped = pool.map(_aggregate_chunk_shared, chunks)
        return _collect(mapped, len(targets), len(chunks), progress)


def _collect(mapped, n_targets: int, n_chunks: int, progress: bool) -> list[AggregateResult]:
    results = list(
        chain.from_iterable(iter_progress(mapped, total=n_chunks, desc="Aggregating", enabled=progress))
    )
    logger.debug(LogTemplates.PROCESSING_STATS.format(input_count=n_targets, output_count=len(results)))
    return results
