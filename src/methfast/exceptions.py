"""Custom exceptions for methfast."""

from __future__ import annotations

from typing import Optional


class MethfastError(Exception):
    """Base exception for all methfast errors."""

    pass


class ConfigurationError(MethfastError):
    """Raised when configuration is invalid or missing."""

    pass


class ColumnIndexError(ConfigurationError):
    """Raised when no configured column combination fits a record."""

    def __init__(self, message: str = "invalid column indices", line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number


class FileFormatError(MethfastError):
    """Raised when file format is invalid or unsupported."""

    pass


class UnsortedInputError(FileFormatError):
    """Raised when the methylation table is not sorted by (chrom, start, end)."""

    def __init__(self, line_number: int, previous: tuple, current: tuple):
        """Initialize UnsortedInputError with the offending records.

        Args:
            line_number: 1-based line number of the out-of-order record
            previous: (chrom, start, end) of the preceding record
            current: (chrom, start, end) of the offending record
        """
        message = (
            "Methylation BED file is not sorted. Exiting...\n"
            f"Line {line_number}: {' '.join(map(str, previous))}, "
            f"then {' '.join(map(str, current))}"
        )
        super().__init__(message)
        self.line_number = line_number
        self.previous = previous
        self.current = current
