"""methfast: weighted methylation fractions over target intervals."""

from methfast.__version__ import __version__

__all__ = ["__version__"]
