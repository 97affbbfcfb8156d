"""
Version constants for the term extraction pipeline.

Component versions are stamped on every ExtractionResult so that term lists
produced by different releases can be told apart.
"""

__version__ = "1.0.0"

# Component versions (update these when implementations change)
GRAMMAR_VERSION = "np-grammar-1.0.0"
FEATURES_VERSION = "features-1.0.0"
RANKER_VERSION = "ranker-1.0.0"
STOPLIST_VERSION = "stopwords-en-2025.1"


def get_extractor_version() -> str:
    """
    Get the composite version string of the extraction pipeline.

    Returns:
        Version string such as ``"1.0.0+np-grammar-1.0.0+features-1.0.0+ranker-1.0.0"``
    """
    return "+".join([__version__, GRAMMAR_VERSION, FEATURES_VERSION, RANKER_VERSION])
