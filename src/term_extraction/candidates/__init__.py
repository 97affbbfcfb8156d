"""
Candidate term generation.

Public API for turning annotated documents into candidate term counts under a
configurable noun-phrase grammar.
"""

from .extractor import CandidateExtractor, DocumentCandidates
from .grammar import CandidateSpan, NounPhraseGrammar, build_grammar
from .stopwords import STOPLIST_VERSION, STOPWORDS_EN, load_stopwords, load_word_list

__all__ = [
    "CandidateExtractor",
    "DocumentCandidates",
    "CandidateSpan",
    "NounPhraseGrammar",
    "build_grammar",
    "STOPWORDS_EN",
    "STOPLIST_VERSION",
    "load_stopwords",
    "load_word_list",
]
