"""tqdm progress bars for long-running batch steps."""

from __future__ import annotations

import sys
from typing import Iterable, Iterator, Optional, TypeVar

from tqdm import tqdm

T = TypeVar("T")


def iter_progress(
    iterable: Iterable[T],
    total: Optional[int] = None,
    desc: Optional[str] = None,
    enabled: bool = True,
    unit: str = "chunk",
) -> Iterator[T]:
    """Yield from ``iterable``, drawing a bar on stderr when ``enabled``."""
    bar = tqdm(
        iterable,
        total=total,
        desc=desc,
        unit=unit,
        disable=not enabled,
        file=sys.stderr,
        dynamic_ncols=True,
        mininterval=0.5,
    )
    return iter(bar)
