"""Click application entrypoint for methfast."""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from types import FrameType
from typing import Optional

import click

from methfast import __version__
from methfast.cli.exit_codes import (
    EXIT_SUCCESS,
    EXIT_ERROR,
    EXIT_SIGINT,
    EXIT_SIGTERM,
)
from methfast.exceptions import MethfastError
from methfast.utils.logging import get_logger, level_from_verbosity, setup_logging

from .common_options import (
    column_options,
    config_option,
    log_file_option,
    output_option,
    progress_option,
    threads_option,
    verbose_option,
)
from .pipeline import RunOptions, execute_run


class _Terminated(Exception):
    """Raised from the SIGTERM handler to unwind the call stack."""


def _handle_signal(signum: int, frame: Optional[FrameType]) -> None:
    """Handle interrupt signals for graceful shutdown."""
    if signum == signal.SIGTERM:
        click.echo("\nSIGTERM received, shutting down...", err=True)
        raise _Terminated()
    click.echo("\nSIGINT received, shutting down...", err=True)
    raise KeyboardInterrupt("SIGINT received")


def _print_version(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if value and not ctx.resilient_parsing:
        click.echo(f"methfast {__version__}")
        ctx.exit()


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument(
    "methylation_bed",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "target_bed",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@column_options
@output_option
@threads_option
@config_option
@progress_option
@verbose_option
@log_file_option
@click.option(
    "-V",
    "--version",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_version,
    help="Show the version and exit.",
)
def cli(
    methylation_bed: Path,
    target_bed: Path,
    fraction_col: Optional[int],
    coverage_col: Optional[int],
    methylated_col: Optional[int],
    unmethylated_col: Optional[int],
    output: Optional[Path],
    threads: Optional[int],
    config: Optional[Path],
    progress: bool,
    verbose: int,
    log_file: Optional[Path],
) -> None:
    """Extract weighted methylation values for target BED intervals.

    For every interval in TARGET_BED, reports the number of overlapping
    records in METHYLATION_BED, their total coverage and the
    coverage-weighted methylated fraction. METHYLATION_BED (plain or gzip)
    must be sorted by chromosome, start and end.
    """
    setup_logging(level=level_from_verbosity(verbose), log_file=log_file)
    logger = get_logger("cli")

    opts = RunOptions(
        methylation_bed=methylation_bed,
        target_bed=target_bed,
        output=output,
        config_path=config,
        fraction_col=fraction_col,
        coverage_col=coverage_col,
        methylated_col=methylated_col,
        unmethylated_col=unmethylated_col,
        threads=threads,
        progress=progress,
        verbose=verbose,
        log_file=log_file,
    )

    try:
        execute_run(opts, logger)
    except MethfastError as exc:
        logger.error(f"{exc}")
        sys.exit(EXIT_ERROR)
    except OSError as exc:
        logger.error(f"I/O error: {exc}")
        sys.exit(EXIT_ERROR)


def main(argv: list[str] | None = None) -> int:
    """Main entry point with signal handling."""
    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        cli(argv, standalone_mode=False)
        return EXIT_SUCCESS
    except (KeyboardInterrupt, click.Abort):
        return EXIT_SIGINT
    except _Terminated:
        return EXIT_SIGTERM
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:
        # Preserve explicit exit codes from cli()
        return exc.code if isinstance(exc.code, int) else EXIT_ERROR
    except Exception as exc:
        get_logger("cli").exception(f"Unexpected error: {exc}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
