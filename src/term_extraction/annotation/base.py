"""
Linguistic annotation contract and per-thread annotator caching.

Tokenizers, taggers and lemmatizers are not assumed to be reentrant. Each
worker thread therefore owns exactly one annotator, built on first use and
reused for every document that thread processes.
"""

import threading
from typing import Callable, List, Optional, Protocol, runtime_checkable

import structlog

from ..models.document import AnnotatedToken

logger = structlog.get_logger(__name__)


@runtime_checkable
class LinguisticAnnotator(Protocol):
    """
    Tokenizes, tags and optionally lemmatizes text.

    ``lemmatize`` returns None when no lemmatizer is configured.
    """

    def tokenize(self, text: str) -> List[str]:
        ...

    def tag(self, tokens: List[str]) -> List[str]:
        ...

    def lemmatize(self, tokens: List[str], tags: List[str]) -> Optional[List[str]]:
        ...


AnnotatorFactory = Callable[[], LinguisticAnnotator]


def annotate(annotator: LinguisticAnnotator, text: str) -> List[AnnotatedToken]:
    """
    Run the full annotation chain over a text.

    Args:
        annotator: Annotator owned by the calling thread
        text: Raw document text

    Returns:
        One AnnotatedToken per token, with lemmas when available

    Raises:
        ValueError: If the annotator returns tags or lemmas that do not line up
            with the tokens
    """
    tokens = annotator.tokenize(text)
    tags = annotator.tag(tokens)
    if len(tags) != len(tokens):
        raise ValueError(f"Tagger returned {len(tags)} tags for {len(tokens)} tokens")

    lemmas = annotator.lemmatize(tokens, tags)
    if lemmas is None:
        return [AnnotatedToken(text=tok, tag=tag) for tok, tag in zip(tokens, tags)]
    if len(lemmas) != len(tokens):
        raise ValueError(f"Lemmatizer returned {len(lemmas)} lemmas for {len(tokens)} tokens")

    return [
        AnnotatedToken(text=tok, tag=tag, lemma=lemma)
        for tok, tag, lemma in zip(tokens, tags, lemmas)
    ]


class ThreadLocalAnnotators:
    """
    Hands each thread its own annotator instance.

    The factory is called at most once per thread, the first time that thread
    asks for an annotator.

    Examples:
        >>> annotators = ThreadLocalAnnotators(WhitespaceAnnotator)
        >>> annotators.get() is annotators.get()
        True
    """

    def __init__(self, factory: AnnotatorFactory):
        self._factory = factory
        self._local = threading.local()
        self._lock = threading.Lock()
        self._instances_created = 0

    def get(self) -> LinguisticAnnotator:
        """Return the calling thread's annotator, creating it on first use."""
        annotator = getattr(self._local, "annotator", None)
        if annotator is None:
            annotator = self._factory()
            self._local.annotator = annotator
            with self._lock:
                self._instances_created += 1
            logger.debug(
                "annotator_created",
                thread=threading.current_thread().name,
                annotator=type(annotator).__name__,
            )
        return annotator

    @property
    def instances_created(self) -> int:
        """Number of annotators built so far (one per thread that asked)."""
        with self._lock:
            return self._instances_created
