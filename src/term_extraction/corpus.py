"""
Document sources for term extraction.

Corpus indexing and search live outside this package. The pipeline only needs
something it can iterate over and ask for its size; ``InMemoryCorpus`` and
``load_corpus`` cover the common case of a corpus held in a JSON file.
"""

import json
from pathlib import Path
from typing import Iterable, Iterator, List, Protocol, runtime_checkable

import structlog

from .exceptions import ResourceLoadError
from .models.document import Document

logger = structlog.get_logger(__name__)


@runtime_checkable
class DocumentSource(Protocol):
    """Anything that yields Documents and knows how many it holds."""

    def __iter__(self) -> Iterator[Document]:
        ...

    def size(self) -> int:
        ...


class InMemoryCorpus:
    """
    A list-backed document source.

    Examples:
        >>> corpus = InMemoryCorpus([Document(id="d1", contents="Text mining")])
        >>> corpus.size()
        1
    """

    def __init__(self, documents: Iterable[Document]):
        self._documents: List[Document] = list(documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def size(self) -> int:
        return len(self._documents)


def load_corpus(path: Path) -> InMemoryCorpus:
    """
    Load a corpus from a JSON file.

    Accepted layouts are a list of document objects or an object with a
    ``documents`` list. Each document needs an ``id`` and may have
    ``contents``, ``date`` (ISO format) and ``metadata``.

    Args:
        path: Path to the corpus JSON file

    Returns:
        InMemoryCorpus with the parsed documents

    Raises:
        ResourceLoadError: If the file is missing or not a valid corpus
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("documents", [])
        documents = [Document.model_validate(item) for item in data]
    except (OSError, TypeError, ValueError) as e:
        raise ResourceLoadError(f"corpus {path}", str(e)) from e

    logger.info("corpus_loaded", path=str(path), documents=len(documents))
    return InMemoryCorpus(documents)
