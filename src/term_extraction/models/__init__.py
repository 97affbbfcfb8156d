# Data models for the term extraction pipeline

from .configuration import Feature, TermExtractionConfig, WeightingMethod, load_config
from .document import AnnotatedToken, Document
from .terms import DocumentTopic, ExtractionResult, Topic

__all__ = [
    "Feature",
    "WeightingMethod",
    "TermExtractionConfig",
    "load_config",
    "Document",
    "AnnotatedToken",
    "Topic",
    "DocumentTopic",
    "ExtractionResult",
]
