"""Target interval loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union

from methfast.core.intervals import parse_int_or_zero
from methfast.utils.files import iter_lines
from methfast.utils.logging import LogTemplates, get_logger

logger = get_logger("targets")


@dataclass(frozen=True)
class TargetInterval:
    """One query region [start, end) on ``chrom``."""

    chrom: str
    start: int
    end: int


def parse_targets(lines: Iterable[str]) -> list[TargetInterval]:
    """Parse tab-delimited ``chrom start end`` records.

    Records lacking any of the three fields are skipped; trailing fields are
    ignored. Order and duplicates are kept as given.
    """
    targets: list[TargetInterval] = []
    for line in lines:
        tokens = line.rstrip("\r\n").split("\t", 3)
        if len(tokens) < 3:
            continue
        chrom, start, end = tokens[:3]
        targets.append(TargetInterval(chrom, parse_int_or_zero(start), parse_int_or_zero(end)))
    return targets


def load_targets(path: Union[str, Path]) -> list[TargetInterval]:
    """Read targets from a plain or gzip-compressed BED file."""
    targets = parse_targets(iter_lines(path))
    logger.info(LogTemplates.FILE_LOADED.format(count=len(targets), path=path))
    return targets
