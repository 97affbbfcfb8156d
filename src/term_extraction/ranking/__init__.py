"""
Term ranking and selection.
"""

from .ranker import Ranker, Ranking, ensure_document_coverage

__all__ = ["Ranker", "Ranking", "ensure_document_coverage"]
