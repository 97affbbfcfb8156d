"""
Statistical term extraction.

Finds multi-word domain terms in a corpus, scores them with corpus statistics
and returns a ranked term list with per-document occurrence links.
"""

from .version import __version__

__all__ = ["__version__"]
