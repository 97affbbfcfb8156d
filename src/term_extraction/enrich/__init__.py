"""
Corpus statistics for externally supplied terms.
"""

from .enrich_terms import add_tfidf, build_term_trie, enrich_terms
from .trie import WordTrie

__all__ = ["add_tfidf", "build_term_trie", "enrich_terms", "WordTrie"]
