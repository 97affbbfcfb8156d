"""
English stop word list and word-list file loading.
"""

from pathlib import Path
from typing import FrozenSet, Optional, Set

import structlog

from ..exceptions import ResourceLoadError
from ..version import STOPLIST_VERSION

logger = structlog.get_logger(__name__)

__all__ = ["STOPWORDS_EN", "STOPLIST_VERSION", "load_word_list", "load_stopwords"]


STOPWORDS_EN: FrozenSet[str] = frozenset(
    """
    i me my myself we our ours ourselves you your yours yourself yourselves
    he him his himself she her hers herself it its itself they them their
    theirs themselves what which who whom this that these those am is are was
    were be been being have has had having do does did doing a an the and but
    if or because as until while of at by for with about against between into
    through during before after above below to from up down in out on off
    over under again further then once here there when where why how all any
    both each few more most other some such no nor not only own same so than
    too very s t can will just don should now d ll m o re ve y ain aren
    couldn didn doesn hadn hasn haven isn ma mightn mustn needn shan shouldn
    wasn weren won wouldn
    """.split()
    # common junk from URLs and HTML
    + ["com", "http", "www", "nbsp"]
)


def load_word_list(path: Path, resource: str = "word list") -> Set[str]:
    """
    Load a word list file (one entry per line, blank lines ignored).

    Entries are stripped and lower-cased.

    Args:
        path: Path to the file
        resource: Name used in the error message

    Returns:
        Set of entries

    Raises:
        ResourceLoadError: If the file cannot be read
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            words = {line.strip().lower() for line in f if line.strip()}
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceLoadError(f"{resource} {path}", str(e)) from e

    logger.debug("word_list_loaded", path=str(path), resource=resource, entries=len(words))
    return words


def load_stopwords(path: Optional[Path] = None) -> Set[str]:
    """
    Load stop words from a file, or return the built-in English list.

    Args:
        path: Optional stop word file

    Returns:
        Set of lower-cased stop words
    """
    if path is None:
        return set(STOPWORDS_EN)
    return load_word_list(path, resource="stop word file")
