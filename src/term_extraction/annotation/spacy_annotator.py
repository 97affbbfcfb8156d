"""
spaCy-backed linguistic annotator.

Provides tokenization, Penn Treebank tagging (``token.tag_``) and
lemmatization from a single spaCy pipeline. spaCy pipelines are not shared
between threads: the factory hands out one pipeline per worker.
"""

import threading
from typing import List, Optional

import spacy
import structlog
from spacy.language import Language
from spacy.tokens import Doc

from ..config import settings
from ..exceptions import ResourceLoadError

logger = structlog.get_logger(__name__)

# Components never needed for tagging and lemmatization
DISABLED_COMPONENTS = ["ner", "parser", "textcat"]


def load_spacy_model(model_name: str) -> Language:
    """
    Load a spaCy model by package name.

    Args:
        model_name: Installed spaCy package (e.g. ``en_core_web_sm``)

    Returns:
        Initialized spaCy Language instance

    Raises:
        ResourceLoadError: If the model is not installed
    """
    try:
        return spacy.load(model_name, exclude=DISABLED_COMPONENTS)
    except OSError as e:
        raise ResourceLoadError(
            f"spaCy model '{model_name}'",
            f"not found; install it with: python -m spacy download {model_name}",
        ) from e


class SpacyAnnotator:
    """
    Annotator wrapping one spaCy pipeline.

    ``tokenize`` parses the whole text once and keeps the parsed Doc, so the
    following ``tag`` and ``lemmatize`` calls for the same tokens reuse it.
    Instances are not thread-safe; use one per thread.
    """

    def __init__(self, nlp: Language, use_lemmas: bool = True):
        self.nlp = nlp
        self.use_lemmas = use_lemmas
        self._last_doc: Optional[Doc] = None
        self._last_tokens: Optional[List[str]] = None

    def tokenize(self, text: str) -> List[str]:
        doc = self.nlp(text)
        tokens = [token for token in doc if not token.is_space]
        self._last_doc = doc
        self._last_tokens = [token.text for token in tokens]
        return list(self._last_tokens)

    def _doc_for(self, tokens: List[str]) -> List:
        if self._last_doc is not None and tokens == self._last_tokens:
            return [token for token in self._last_doc if not token.is_space]
        # Tokens did not come from tokenize(): run the pipeline on them as given
        doc = self.nlp(Doc(self.nlp.vocab, words=list(tokens)))
        return list(doc)

    def tag(self, tokens: List[str]) -> List[str]:
        return [token.tag_ for token in self._doc_for(tokens)]

    def lemmatize(self, tokens: List[str], tags: List[str]) -> Optional[List[str]]:
        if not self.use_lemmas:
            return None
        return [token.lemma_ or token.text for token in self._doc_for(tokens)]


class SpacyAnnotatorFactory:
    """
    Builds one SpacyAnnotator per worker thread.

    The model is loaded once at construction so that a missing model fails
    before any document is processed. That first pipeline is handed to the
    first worker; later workers load their own copy.

    Examples:
        >>> factory = SpacyAnnotatorFactory("en_core_web_sm")
        >>> annotators = ThreadLocalAnnotators(factory)
    """

    def __init__(self, model_name: Optional[str] = None, use_lemmas: Optional[bool] = None):
        self.model_name = model_name or settings.spacy_model_name
        self.use_lemmas = settings.spacy_use_lemmas if use_lemmas is None else use_lemmas
        self._lock = threading.Lock()
        self._spare: Optional[Language] = load_spacy_model(self.model_name)
        logger.info("spacy_model_loaded", model=self.model_name, use_lemmas=self.use_lemmas)

    def __call__(self) -> SpacyAnnotator:
        with self._lock:
            nlp, self._spare = self._spare, None
        if nlp is None:
            nlp = load_spacy_model(self.model_name)
        return SpacyAnnotator(nlp, use_lemmas=self.use_lemmas)
