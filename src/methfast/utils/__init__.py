"""Utility functions (methfast)."""

from methfast.utils.logging import get_logger, setup_logging
from methfast.utils.files import iter_lines, open_text
from methfast.utils.progress import iter_progress

__all__ = ["get_logger", "setup_logging", "iter_lines", "open_text", "iter_progress"]
