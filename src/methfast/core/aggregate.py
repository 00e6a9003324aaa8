"""
Overlap aggregation of methylation intervals for a single target.

Intervals and targets are half-open. For a target [start, end) the first
candidate is found by binary search on interval ends; the scan then walks
forward until an interval starts at or after the target end.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from methfast.core.intervals import IntervalTable
from methfast.core.targets import TargetInterval


@dataclass(frozen=True)
class AggregateResult:
    """Overlap summary for one target."""

    num_positions: int = 0
    total_coverage: int = 0
    weighted_fraction: float = 0.0


ZERO_AGGREGATE = AggregateResult()


def lower_bound_end(ends: Union[np.ndarray, Sequence[int]], anchor: int) -> int:
    """Return the smallest index ``i`` with ``ends[i] > anchor``.

    Intervals ending at or before ``anchor`` cannot overlap a half-open
    interval that starts at ``anchor``.
    """
    return int(np.searchsorted(np.asarray(ends), anchor, side="right"))


def aggregate_target(table: IntervalTable, target: TargetInterval) -> AggregateResult:
    """Reduce the intervals overlapping ``target`` to a coverage-weighted fraction."""
    chrom_intervals = table.get(target.chrom)
    if chrom_intervals is None:
        return ZERO_AGGREGATE

    num_positions = 0
    total_coverage = 0
    weighted_sum = 0.0

    intervals = chrom_intervals.intervals
    for i in range(lower_bound_end(chrom_intervals.ends, target.start), len(intervals)):
        iv = intervals[i]
        if iv.start >= target.end:
            break
        if iv.end > target.start:
            num_positions += 1
            total_coverage += iv.coverage
            weighted_sum += iv.weighted

    if total_coverage > 0:
        weighted_fraction = weighted_sum / total_coverage
    else:
        weighted_fraction = 0.0
    return AggregateResult(num_positions, total_coverage, weighted_fraction)


def format_result(target: TargetInterval, result: AggregateResult) -> str:
    """Render one output row (tab-delimited, fraction to 4 decimals)."""
    fraction = result.weighted_fraction
    fraction_text = "NaN" if math.isnan(fraction) else f"{fraction:.4f}"
    return (
        f"{target.chrom}\t{target.start}\t{target.end}\t"
        f"{result.num_positions}\t{result.total_coverage}\t{fraction_text}"
    )
