"""Pytest configuration for methfast tests."""

import logging
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def reset_logging_after_test():
    """Reset methfast logger state after each test.

    setup_logging() sets propagate=False, which breaks caplog in later tests.
    """
    yield
    app_logger = logging.getLogger("methfast")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True


@pytest.fixture
def write_text(tmp_path):
    """Write ``text`` to a file under tmp_path and return its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def meth_bed(write_text):
    """Small sorted methylation table (fraction in col 4, coverage in col 5)."""
    return write_text(
        "meth.bed",
        "chr1\t10\t11\t1.0\t5\n"
        "chr1\t12\t13\t0.5\t10\n"
        "chr1\t20\t21\t0.0\t3\n"
        "chr2\t5\t6\t0.25\t4\n",
    )


@pytest.fixture
def target_bed(write_text):
    return write_text(
        "targets.bed",
        "chr1\t9\t14\tpromoterA\n"
        "chr3\t0\t100\n"
        "chr1\t0\t100\n"
        "chr2\t5\t6\n",
    )
