"""Tests for the methylation interval table builder."""

from pathlib import Path
import gzip
import pickle
import sys

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from methfast.core.intervals import (
    ChromosomeIntervals,
    ColumnConfig,
    DerivationMode,
    IntervalTable,
    MethInterval,
    build_interval_table,
    derive_values,
    load_interval_table,
    parse_float_or_zero,
    parse_int_or_zero,
    select_derivation_mode,
)
from methfast.exceptions import ColumnIndexError, ConfigurationError, UnsortedInputError


class TestLossyParsing:
    """Malformed numbers degrade to zero instead of failing."""

    @pytest.mark.parametrize(
        "text,expected",
        [("42", 42), ("-7", -7), ("+3", 3), ("0", 0), ("007", 7)],
    )
    def test_parse_int_valid(self, text, expected):
        assert parse_int_or_zero(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "1.5", " 12", "12 ", "1_000", "1e3", "-", "12a"])
    def test_parse_int_malformed_is_zero(self, text):
        assert parse_int_or_zero(text) == 0

    @pytest.mark.parametrize("text", ["2147483648", "-2147483649", "99999999999999999999"])
    def test_parse_int_out_of_int32_range_is_zero(self, text):
        assert parse_int_or_zero(text) == 0

    def test_parse_int_int32_bounds_kept(self):
        assert parse_int_or_zero("2147483647") == 2147483647
        assert parse_int_or_zero("-2147483648") == -2147483648

    @pytest.mark.parametrize(
        "text,expected",
        [("0.5", 0.5), ("1", 1.0), ("-0.25", -0.25), ("1e-2", 0.01), (".5", 0.5)],
    )
    def test_parse_float_valid(self, text, expected):
        assert parse_float_or_zero(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", "NA", "0.5x", " 0.5", "1_0.0", "."])
    def test_parse_float_malformed_is_zero(self, text):
        assert parse_float_or_zero(text) == 0.0


class TestDerivationMode:
    """Column-combination selection in fixed priority order."""

    def test_fraction_coverage_default(self):
        assert select_derivation_mode(ColumnConfig(), 5) is DerivationMode.FRACTION_COVERAGE

    def test_methylated_unmethylated_has_priority(self):
        columns = ColumnConfig(fraction_col=4, coverage_col=5, methylated_col=6, unmethylated_col=7)
        assert select_derivation_mode(columns, 7) is DerivationMode.METHYLATED_UNMETHYLATED

    def test_methylated_coverage_when_unmethylated_unset(self):
        columns = ColumnConfig(fraction_col=4, coverage_col=5, methylated_col=6)
        assert select_derivation_mode(columns, 6) is DerivationMode.METHYLATED_COVERAGE

    def test_falls_back_when_columns_out_of_range(self):
        columns = ColumnConfig(fraction_col=4, coverage_col=5, methylated_col=6, unmethylated_col=7)
        # Only 5 fields: meth/unmeth columns are out of range for this record
        assert select_derivation_mode(columns, 5) is DerivationMode.FRACTION_COVERAGE

    def test_no_valid_combination_raises(self):
        with pytest.raises(ColumnIndexError, match="invalid column indices"):
            select_derivation_mode(ColumnConfig(fraction_col=0, coverage_col=5), 5)

    def test_column_error_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            select_derivation_mode(ColumnConfig(), 4)


class TestDeriveValues:
    """Fraction and coverage derivation per mode."""

    def test_methylated_unmethylated(self):
        columns = ColumnConfig(methylated_col=4, unmethylated_col=5)
        fields = ["chr1", "0", "1", "3", "1"]
        fraction, coverage = derive_values(fields, columns, DerivationMode.METHYLATED_UNMETHYLATED)
        assert coverage == 4
        assert fraction == pytest.approx(0.75)

    def test_methylated_coverage(self):
        columns = ColumnConfig(coverage_col=5, methylated_col=4)
        fields = ["chr1", "0", "1", "2", "8"]
        fraction, coverage = derive_values(fields, columns, DerivationMode.METHYLATED_COVERAGE)
        assert coverage == 8
        assert fraction == pytest.approx(0.25)

    def test_zero_coverage_gives_zero_fraction(self):
        columns = ColumnConfig(methylated_col=4, unmethylated_col=5)
        fields = ["chr1", "0", "1", "0", "0"]
        assert derive_values(fields, columns, DerivationMode.METHYLATED_UNMETHYLATED) == (0.0, 0)

    def test_fraction_coverage_read_as_given(self):
        fields = ["chr1", "0", "1", "0.9", "0"]
        fraction, coverage = derive_values(fields, ColumnConfig(), DerivationMode.FRACTION_COVERAGE)
        assert fraction == pytest.approx(0.9)
        assert coverage == 0


class TestBuildIntervalTable:
    """Table construction, skipping and sort validation."""

    def test_groups_by_chromosome_in_file_order(self):
        table = build_interval_table(
            [
                "chr1\t10\t11\t1.0\t5",
                "chr1\t12\t13\t0.5\t10",
                "chr2\t1\t2\t0.0\t3",
            ]
        )
        assert table.chromosomes == ["chr1", "chr2"]
        assert [iv.start for iv in table["chr1"]] == [10, 12]
        assert table["chr1"][1] == MethInterval(12, 13, 0.5, 10)
        assert table.num_intervals == 3

    def test_whitespace_delimited_records(self):
        table = build_interval_table(["chr1 10  11\t0.5   2"])
        assert table["chr1"][0] == MethInterval(10, 11, 0.5, 2)

    def test_short_records_skipped(self):
        table = build_interval_table(["track name=x", "", "chr1\t1\t2", "chr1\t10\t11\t1.0\t5"])
        assert len(table["chr1"]) == 1

    def test_ends_non_decreasing(self):
        lines = [f"chr1\t{i * 10}\t{i * 10 + 5}\t0.5\t2" for i in range(50)]
        ends = build_interval_table(lines)["chr1"].ends
        assert np.all(np.diff(ends) >= 0)
        assert len(ends) == 50

    def test_adjacent_records_allowed(self):
        table = build_interval_table(["chr1\t10\t20\t1.0\t1", "chr1\t20\t30\t1.0\t1"])
        assert len(table["chr1"]) == 2

    def test_overlapping_records_rejected(self):
        with pytest.raises(UnsortedInputError) as excinfo:
            build_interval_table(
                [
                    "chr1\t10\t20\t1.0\t1",
                    "chr1\t15\t25\t1.0\t1",
                ]
            )
        err = excinfo.value
        assert err.line_number == 2
        assert err.previous == ("chr1", 10, 20)
        assert err.current == ("chr1", 15, 25)
        assert "not sorted" in str(err)
        assert "Line 2: chr1 10 20, then chr1 15 25" in str(err)

    def test_line_number_counts_skipped_lines(self):
        with pytest.raises(UnsortedInputError) as excinfo:
            build_interval_table(
                [
                    "#header",
                    "chr1\t10\t20\t1.0\t1",
                    "",
                    "chr1\t5\t6\t1.0\t1",
                ]
            )
        assert excinfo.value.line_number == 4

    def test_chromosome_change_resets_comparison(self):
        table = build_interval_table(
            [
                "chr2\t100\t200\t1.0\t1",
                "chr1\t5\t6\t1.0\t1",
            ]
        )
        assert table.chromosomes == ["chr2", "chr1"]

    def test_chromosome_names_case_sensitive(self):
        table = build_interval_table(["chr1\t1\t2\t1.0\t1", "Chr1\t0\t1\t1.0\t1"])
        assert "chr1" in table and "Chr1" in table
        assert "CHR1" not in table

    def test_malformed_coordinates_parse_to_zero(self):
        table = build_interval_table(["chr1\tx\t5\t1.0\t1"])
        assert table["chr1"][0].start == 0

    def test_oversized_coordinate_parses_to_zero(self):
        table = build_interval_table(["chr1\t10\t99999999999999999999\t1.0\t5"])
        assert table["chr1"][0] == MethInterval(10, 0, 1.0, 5)
        assert table["chr1"].ends.tolist() == [0]

    def test_short_line_can_trigger_column_error(self):
        columns = ColumnConfig(fraction_col=4, coverage_col=5)
        with pytest.raises(ColumnIndexError) as excinfo:
            build_interval_table(["chr1\t1\t2\t1.0\t3", "chr1\t5\t6\t1.0"], columns)
        assert excinfo.value.line_number == 2

    def test_priority_mode_used_per_record(self):
        columns = ColumnConfig(fraction_col=4, coverage_col=5, methylated_col=6, unmethylated_col=7)
        table = build_interval_table(["chr1\t0\t1\t0.9\t100\t1\t3"], columns)
        iv = table["chr1"][0]
        assert iv.coverage == 4
        assert iv.fraction == pytest.approx(0.25)


class TestIntervalContainers:
    """ChromosomeIntervals and IntervalTable behaviour."""

    def test_weighted_contribution(self):
        assert MethInterval(0, 1, 0.5, 10).weighted == pytest.approx(5.0)

    def test_ends_array_read_only(self):
        chrom = ChromosomeIntervals([MethInterval(0, 2, 1.0, 1), MethInterval(5, 6, 1.0, 1)])
        assert chrom.ends.tolist() == [2, 6]
        with pytest.raises(ValueError):
            chrom.ends[0] = 10

    def test_table_pickles(self):
        table = IntervalTable({"chr1": [MethInterval(0, 2, 1.0, 1)]})
        restored = pickle.loads(pickle.dumps(table))
        assert restored["chr1"].intervals == table["chr1"].intervals
        assert restored["chr1"].ends.tolist() == [2]

    def test_missing_chromosome(self):
        table = IntervalTable()
        assert table.get("chr1") is None
        assert len(table) == 0


class TestLoadIntervalTable:
    """Reading tables from disk."""

    def test_plain_file(self, meth_bed):
        table = load_interval_table(meth_bed)
        assert table.num_intervals == 4

    def test_gzip_file(self, tmp_path):
        path = tmp_path / "meth.bed.gz"
        with gzip.open(path, "wt", encoding="utf-8") as fh:
            fh.write("chr1\t10\t11\t1.0\t5\n")
            fh.write("chr1\t12\t13\t0.5\t10\n")
        table = load_interval_table(path)
        assert table.num_intervals == 2

    def test_unsorted_file_rejected(self, write_text):
        path = write_text("bad.bed", "chr1\t10\t20\t1\t1\nchr1\t0\t5\t1\t1\n")
        with pytest.raises(UnsortedInputError):
            load_interval_table(path)
