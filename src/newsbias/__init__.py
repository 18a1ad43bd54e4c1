"""newsbias - political bias analysis for Indian news feeds."""

from newsbias.__version__ import __version__

__all__ = ["__version__"]
