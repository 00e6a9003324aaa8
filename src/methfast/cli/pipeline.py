"""Run execution helpers for the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from methfast.config import Config, load_config
from methfast.core.batch import run_batch
from methfast.core.intervals import load_interval_table
from methfast.core.output import results_frame, write_results
from methfast.core.targets import load_targets
from methfast.utils.logging import LogTemplates, level_from_name, setup_logging


@dataclass
class RunOptions:
    """Container for options given on the command line (None = not given)."""

    methylation_bed: Path
    target_bed: Path
    output: Optional[Path] = None
    config_path: Optional[Path] = None
    fraction_col: Optional[int] = None
    coverage_col: Optional[int] = None
    methylated_col: Optional[int] = None
    unmethylated_col: Optional[int] = None
    threads: Optional[int] = None
    progress: bool = False
    verbose: int = 0
    log_file: Optional[Path] = None


def resolve_config(opts: RunOptions) -> Config:
    """Merge defaults, the optional YAML config and explicit CLI options."""
    cfg = load_config(opts.config_path) if opts.config_path else Config()

    cfg.methylation_bed = opts.methylation_bed
    cfg.target_bed = opts.target_bed
    if opts.output is not None:
        cfg.output = opts.output
    if opts.threads is not None:
        cfg.threads = opts.threads
    if opts.progress:
        cfg.runtime.enable_progress = True
    if opts.log_file is not None:
        cfg.runtime.log_file = opts.log_file

    overrides = {
        name: value
        for name, value in (
            ("fraction_col", opts.fraction_col),
            ("coverage_col", opts.coverage_col),
            ("methylated_col", opts.methylated_col),
            ("unmethylated_col", opts.unmethylated_col),
        )
        if value is not None
    }
    if overrides:
        cfg.columns = replace(cfg.columns, **overrides)

    cfg.validate()
    return cfg


def execute_run(opts: RunOptions, logger: logging.Logger) -> None:
    """
    Load both inputs, aggregate every target and write the result rows.

    Everything is loaded before anything is written, so fatal input errors
    never leave partial output behind.
    """
    cfg = resolve_config(opts)

    # CLI -v takes precedence over the config file's log level
    if opts.verbose == 0:
        setup_logging(
            level=level_from_name(cfg.runtime.log_level),
            log_file=cfg.runtime.log_file,
        )

    logger.debug(f"Column configuration: {cfg.columns}")
    table = load_interval_table(cfg.methylation_bed, cfg.columns)
    targets = load_targets(cfg.target_bed)

    results = run_batch(
        table,
        targets,
        workers=cfg.threads,
        chunksize=cfg.runtime.chunksize,
        progress=cfg.runtime.enable_progress,
    )
    if logger.isEnabledFor(logging.INFO):
        frame = results_frame(targets, results)
        covered = int((frame["num_positions"] > 0).sum())
        logger.info(LogTemplates.TARGETS_COVERED.format(covered=covered, total=len(frame)))
    write_results(targets, results, cfg.output)
