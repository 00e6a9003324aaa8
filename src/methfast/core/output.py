"""Result table assembly and writing."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import IO, Optional, Sequence, Union

import pandas as pd

from methfast.core.aggregate import AggregateResult, format_result
from methfast.core.targets import TargetInterval
from methfast.utils.logging import LogTemplates, get_logger

logger = get_logger("output")

OUTPUT_COLUMNS = [
    "chrom",
    "start",
    "end",
    "num_positions",
    "total_coverage",
    "weighted_fraction",
]


def results_frame(
    targets: Sequence[TargetInterval], results: Sequence[AggregateResult]
) -> pd.DataFrame:
    """Combine targets and their aggregates into one row per target."""
    if len(targets) != len(results):
        raise ValueError(
            f"Got {len(results)} results for {len(targets)} targets; they must align"
        )
    df = pd.DataFrame(
        {
            "chrom": pd.Series([t.chrom for t in targets], dtype=object),
            "start": pd.Series([t.start for t in targets], dtype="int64"),
            "end": pd.Series([t.end for t in targets], dtype="int64"),
            "num_positions": pd.Series([r.num_positions for r in results], dtype="int64"),
            "total_coverage": pd.Series([r.total_coverage for r in results], dtype="int64"),
            "weighted_fraction": pd.Series(
                [r.weighted_fraction for r in results], dtype="float64"
            ),
        },
        columns=OUTPUT_COLUMNS,
    )
    return df


def write_results(
    targets: Sequence[TargetInterval],
    results: Sequence[AggregateResult],
    output: Optional[Union[str, Path, IO[str]]] = None,
) -> None:
    """Write result rows as headerless TSV to a path, an open stream or stdout.

    Chromosome names are written verbatim; no quoting or escaping is applied.
    """
    if len(targets) != len(results):
        raise ValueError(
            f"Got {len(results)} results for {len(targets)} targets; they must align"
        )
    rows = (format_result(target, result) + "\n" for target, result in zip(targets, results))

    if output is None:
        sys.stdout.writelines(rows)
    elif isinstance(output, (str, Path)):
        with open(output, "w", encoding="utf-8", newline="\n") as fh:
            fh.writelines(rows)
        logger.info(LogTemplates.FILE_WRITTEN.format(count=len(targets), path=output))
    else:
        output.writelines(rows)
