"""
Linguistic annotation for term extraction.

The spaCy implementation lives in ``annotation.spacy_annotator`` and is
imported on demand so that model-free use does not load spaCy.
"""

from .base import AnnotatorFactory, LinguisticAnnotator, ThreadLocalAnnotators, annotate
from .simple import PreTaggedAnnotator, RegexAnnotator, WhitespaceAnnotator

__all__ = [
    "AnnotatorFactory",
    "LinguisticAnnotator",
    "ThreadLocalAnnotators",
    "annotate",
    "PreTaggedAnnotator",
    "RegexAnnotator",
    "WhitespaceAnnotator",
]
