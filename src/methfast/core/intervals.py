"""
Methylation interval table construction.

Parses a methylation BED-like table sorted by (chrom, start, end) into one
ordered interval sequence per chromosome. Each record contributes a
methylated fraction and a read coverage, derived from whichever configured
column combination fits the record:

1. methylated + unmethylated counts
2. methylated count + coverage
3. fraction + coverage

Sort order is verified while reading and never repaired.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

import numpy as np

from methfast.exceptions import ColumnIndexError, UnsortedInputError
from methfast.utils.files import iter_lines
from methfast.utils.logging import LogTemplates, get_logger

logger = get_logger("intervals")

MIN_FIELDS = 4

_INT_RE = re.compile(r"[+-]?[0-9]+")

# Coordinates and counts are signed 32-bit values
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def parse_int_or_zero(text: str) -> int:
    """Parse a signed decimal integer, returning 0 for anything malformed.

    Only an optional sign followed by ASCII digits is accepted; surrounding
    whitespace, underscores and decimal points all degrade to 0, as do
    values outside the signed 32-bit range.
    """
    if _INT_RE.fullmatch(text) is None:
        return 0
    value = int(text)
    if value < INT32_MIN or value > INT32_MAX:
        return 0
    return value


def parse_float_or_zero(text: str) -> float:
    """Parse a float, returning 0.0 for anything malformed."""
    if not text or "_" in text or text != text.strip():
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


@dataclass(frozen=True)
class MethInterval:
    """One measured half-open interval [start, end)."""

    start: int
    end: int
    fraction: float
    coverage: int

    @property
    def weighted(self) -> float:
        """Contribution to the weighted sum (fraction * coverage)."""
        return self.fraction * self.coverage


@dataclass(frozen=True)
class ColumnConfig:
    """1-based column indices for value derivation; 0 means unset."""

    fraction_col: int = 4
    coverage_col: int = 5
    methylated_col: int = 0
    unmethylated_col: int = 0


class DerivationMode(Enum):
    """How fraction and coverage are obtained from a record."""

    METHYLATED_UNMETHYLATED = "methylated_unmethylated"
    METHYLATED_COVERAGE = "methylated_coverage"
    FRACTION_COVERAGE = "fraction_coverage"


def _in_range(col: int, field_count: int) -> bool:
    return 0 < col <= field_count


@lru_cache(maxsize=64)
def select_derivation_mode(columns: ColumnConfig, field_count: int) -> DerivationMode:
    """
    Pick the derivation mode for a record with ``field_count`` fields.

    Modes are tried in fixed priority order; the first whose two columns are
    both set and within the record wins.

    Raises:
        ColumnIndexError: If no column combination fits the record
    """
    if _in_range(columns.methylated_col, field_count) and _in_range(
        columns.unmethylated_col, field_count
    ):
        return DerivationMode.METHYLATED_UNMETHYLATED
    if _in_range(columns.methylated_col, field_count) and _in_range(
        columns.coverage_col, field_count
    ):
        return DerivationMode.METHYLATED_COVERAGE
    if _in_range(columns.coverage_col, field_count) and _in_range(
        columns.fraction_col, field_count
    ):
        return DerivationMode.FRACTION_COVERAGE
    raise ColumnIndexError()


def derive_values(
    fields: list[str], columns: ColumnConfig, mode: DerivationMode
) -> tuple[float, int]:
    """Return (fraction, coverage) for a split record under ``mode``."""
    if mode is DerivationMode.FRACTION_COVERAGE:
        fraction = parse_float_or_zero(fields[columns.fraction_col - 1])
        coverage = parse_int_or_zero(fields[columns.coverage_col - 1])
        return fraction, coverage

    methylated = parse_int_or_zero(fields[columns.methylated_col - 1])
    if mode is DerivationMode.METHYLATED_UNMETHYLATED:
        coverage = methylated + parse_int_or_zero(fields[columns.unmethylated_col - 1])
    else:
        coverage = parse_int_or_zero(fields[columns.coverage_col - 1])
    fraction = methylated / coverage if coverage > 0 else 0.0
    return fraction, coverage


class ChromosomeIntervals:
    """Read-only, file-ordered intervals of one chromosome.

    ``ends`` mirrors the interval ends as an int64 array for binary search.
    """

    __slots__ = ("intervals", "ends")

    def __init__(self, intervals: Iterable[MethInterval]):
        self.intervals: tuple[MethInterval, ...] = tuple(intervals)
        self.ends: np.ndarray = np.fromiter(
            (iv.end for iv in self.intervals), dtype=np.int64, count=len(self.intervals)
        )
        self.ends.setflags(write=False)

    def __len__(self) -> int:
        return len(self.intervals)

    def __iter__(self) -> Iterator[MethInterval]:
        return iter(self.intervals)

    def __getitem__(self, index: int) -> MethInterval:
        return self.intervals[index]

    def __reduce__(self) -> tuple:
        return (ChromosomeIntervals, (self.intervals,))


class IntervalTable:
    """Mapping of chromosome name to its ordered methylation intervals."""

    def __init__(self, by_chrom: Optional[dict[str, Iterable[MethInterval]]] = None):
        self._by_chrom: dict[str, ChromosomeIntervals] = {
            chrom: ivs if isinstance(ivs, ChromosomeIntervals) else ChromosomeIntervals(ivs)
            for chrom, ivs in (by_chrom or {}).items()
        }

    def get(self, chrom: str) -> Optional[ChromosomeIntervals]:
        return self._by_chrom.get(chrom)

    def __getitem__(self, chrom: str) -> ChromosomeIntervals:
        return self._by_chrom[chrom]

    def __contains__(self, chrom: object) -> bool:
        return chrom in self._by_chrom

    def __len__(self) -> int:
        return len(self._by_chrom)

    @property
    def chromosomes(self) -> list[str]:
        return list(self._by_chrom)

    @property
    def num_intervals(self) -> int:
        return sum(len(ivs) for ivs in self._by_chrom.values())


def build_interval_table(
    lines: Iterable[str], columns: ColumnConfig = ColumnConfig()
) -> IntervalTable:
    """
    Build an interval table from methylation records in file order.

    Args:
        lines: Text records, whitespace-delimited (chrom start end ...)
        columns: Column indices used to derive fraction and coverage

    Returns:
        IntervalTable with one ordered sequence per chromosome

    Raises:
        UnsortedInputError: If a record starts before the previous record on
            the same chromosome ends
        ColumnIndexError: If no column combination fits a record
    """
    by_chrom: dict[str, list[MethInterval]] = {}
    previous: Optional[tuple[str, int, int]] = None
    skipped = 0

    for line_number, line in enumerate(lines, start=1):
        fields = line.split()
        if len(fields) < MIN_FIELDS:
            skipped += 1
            continue

        chrom = fields[0]
        start = parse_int_or_zero(fields[1])
        end = parse_int_or_zero(fields[2])

        # A chromosome change resets the comparison
        if previous is not None and chrom == previous[0] and start < previous[2]:
            raise UnsortedInputError(line_number, previous, (chrom, start, end))

        try:
            mode = select_derivation_mode(columns, len(fields))
        except ColumnIndexError as exc:
            raise ColumnIndexError(
                f"invalid column indices (line {line_number} has {len(fields)} fields)",
                line_number=line_number,
            ) from exc
        fraction, coverage = derive_values(fields, columns, mode)

        by_chrom.setdefault(chrom, []).append(MethInterval(start, end, fraction, coverage))
        previous = (chrom, start, end)

    if skipped:
        logger.debug(f"Skipped {skipped:,} records with fewer than {MIN_FIELDS} fields")

    return IntervalTable(by_chrom)


def load_interval_table(
    path: Union[str, Path], columns: ColumnConfig = ColumnConfig()
) -> IntervalTable:
    """Read a plain or gzip-compressed methylation table from ``path``."""
    table = build_interval_table(iter_lines(path), columns)
    logger.info(LogTemplates.FILE_LOADED.format(count=table.num_intervals, path=path))
    logger.debug(f"Methylation table spans {len(table):,} chromosomes")
    return table
