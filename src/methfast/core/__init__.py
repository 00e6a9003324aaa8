"""Core overlap-join machinery for methfast."""

from methfast.core.aggregate import (
    ZERO_AGGREGATE,
    AggregateResult,
    aggregate_target,
    format_result,
    lower_bound_end,
)
from methfast.core.batch import resolve_workers, run_batch
from methfast.core.intervals import (
    ChromosomeIntervals,
    ColumnConfig,
    DerivationMode,
    IntervalTable,
    MethInterval,
    build_interval_table,
    load_interval_table,
    parse_float_or_zero,
    parse_int_or_zero,
    select_derivation_mode,
)
from methfast.core.output import results_frame, write_results
from methfast.core.targets import TargetInterval, load_targets, parse_targets

__all__ = [
    "AggregateResult",
    "ChromosomeIntervals",
    "ColumnConfig",
    "DerivationMode",
    "IntervalTable",
    "MethInterval",
    "TargetInterval",
    "ZERO_AGGREGATE",
    "aggregate_target",
    "build_interval_table",
    "format_result",
    "load_interval_table",
    "load_targets",
    "lower_bound_end",
    "parse_float_or_zero",
    "parse_int_or_zero",
    "parse_targets",
    "resolve_workers",
    "results_frame",
    "run_batch",
    "select_derivation_mode",
    "write_results",
]
