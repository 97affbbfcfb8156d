"""
Term extraction pipeline and result assembly.
"""

from .assembler import assemble_result
from .term_extraction import CorpusStatistics, TermExtraction

__all__ = ["assemble_result", "CorpusStatistics", "TermExtraction"]
