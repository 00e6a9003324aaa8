"""Version information for methfast."""

__version__ = "0.3.0"
__license__ = "MIT"
__description__ = "Coverage-weighted methylation levels for target BED intervals"
