"""Shared Click options for the methfast CLI.

Options default to None so that values from a YAML config file are only
overridden when the option is given explicitly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, TypeVar

import click

F = TypeVar("F", bound=Callable[..., None])


def _column_option(short: str, long: str, dest: str, what: str, default: int) -> Callable[[F], F]:
    shown = "unset" if default == 0 else str(default)

    def decorator(func: F) -> F:
        return click.option(
            short,
            long,
            dest,
            type=click.IntRange(min=0),
            default=None,
            help=f"1-based column of the {what} (0 = unset) [default: {shown}]",
        )(func)

    return decorator


fraction_col_option = _column_option("-f", "--fraction-col", "fraction_col", "methylated fraction", 4)
coverage_col_option = _column_option("-c", "--coverage-col", "coverage_col", "read coverage", 5)
methylated_col_option = _column_option(
    "-m", "--methylated-col", "methylated_col", "methylated read count", 0
)
unmethylated_col_option = _column_option(
    "-u", "--unmethylated-col", "unmethylated_col", "unmethylated read count", 0
)


def output_option(func: F) -> F:
    """Output file option."""
    return click.option(
        "-o",
        "--output",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Output file [default: stdout]",
    )(func)


def config_option(func: F) -> F:
    """Configuration file option."""
    return click.option(
        "--config",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Configuration file (YAML)",
    )(func)


def threads_option(func: F) -> F:
    """Threads option."""
    return click.option(
        "-t",
        "--threads",
        type=click.IntRange(min=0),
        default=None,
        help="Number of worker processes for target intervals [default: all CPUs]",
    )(func)


def progress_option(func: F) -> F:
    """Progress bar option."""
    return click.option(
        "--progress",
        is_flag=True,
        help="Show a progress bar on stderr",
    )(func)


def verbose_option(func: F) -> F:
    """Verbosity option."""
    return click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG)",
    )(func)


def log_file_option(func: F) -> F:
    """Log file option."""
    return click.option(
        "--log-file",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Path for log file output",
    )(func)


def column_options(func: F) -> F:
    """Apply the four column-index options."""
    decorators = [
        fraction_col_option,
        coverage_col_option,
        methylated_col_option,
        unmethylated_col_option,
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func
