"""
Noun-phrase grammar for candidate term generation.

A candidate is a run of consecutive tokens whose part-of-speech tags follow a
simple pattern built from three tag sets:

- preceding tags: may appear anywhere except as the head (e.g. NN, JJ)
- middle tags: may appear inside a run but never start or complete it (e.g. IN)
- head tags: the tag of the head token (e.g. NN, NNS)

With the head in final position (English: "neural network", "rate of change")
the last token carries the head tag. With the head in initial position
(French: "réseau neuronal") the first token does, and the run is completed by
a preceding-tag token.

Stop words and blacklisted words can neither start nor complete a run, but
may sit in the middle of one when their tag allows it.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from ..models.document import AnnotatedToken


@dataclass(frozen=True)
class CandidateSpan:
    """A token run accepted by the grammar (``end`` exclusive)."""

    start: int
    end: int
    term: str
    surface: str

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class NounPhraseGrammar:
    """
    Tag-set driven acceptance rule for candidate terms.

    Examples:
        >>> grammar = NounPhraseGrammar(
        ...     preceding_tags={"JJ", "NN"}, middle_tags={"IN"}, head_tags={"NN"},
        ...     ngram_min=1, ngram_max=3,
        ... )
        >>> tokens = [AnnotatedToken("neural", "JJ"), AnnotatedToken("network", "NN")]
        >>> [span.term for span in grammar.spans(tokens)]
        ['neural network', 'network']
    """

    preceding_tags: Set[str]
    middle_tags: Set[str]
    head_tags: Set[str]
    ngram_min: int = 1
    ngram_max: int = 4
    head_token_final: bool = True
    stopwords: Set[str] = field(default_factory=set)
    blacklist: Set[str] = field(default_factory=set)

    def __post_init__(self):
        self.stopwords = {w.lower() for w in self.stopwords}
        self.blacklist = {w.lower() for w in self.blacklist}
        self._continuing_tags = set(self.preceding_tags) | set(self.middle_tags)
        self._starting_tags = set(self.preceding_tags) | set(self.head_tags)

    def is_blocked(self, token: AnnotatedToken) -> bool:
        """True if the token may not start or complete a candidate."""
        surface = token.text.lower()
        return surface in self.stopwords or surface in self.blacklist

    def _can_start(self, token: AnnotatedToken) -> bool:
        if self.is_blocked(token):
            return False
        if self.head_token_final:
            return token.tag in self._starting_tags
        return token.tag in self.head_tags

    def _can_complete(self, token: AnnotatedToken, length: int) -> bool:
        if self.is_blocked(token):
            return False
        if self.head_token_final:
            return token.tag in self.head_tags
        if length == 1:
            return token.tag in self.head_tags
        return token.tag in self.preceding_tags

    def _can_continue(self, token: AnnotatedToken, length: int) -> bool:
        if not self.head_token_final and length == 1:
            # A head-initial run may always grow past its head
            return True
        return token.tag in self._continuing_tags

    def spans(self, tokens: Sequence[AnnotatedToken]) -> Iterator[CandidateSpan]:
        """
        Yield every token run accepted by the grammar.

        Runs of different lengths starting at the same token are all yielded.

        Args:
            tokens: Annotated tokens of one document

        Yields:
            CandidateSpan for each accepted run, in order of start then length
        """
        n = len(tokens)
        if n < self.ngram_min:
            return

        for i in range(n):
            if not self._can_start(tokens[i]):
                continue
            for j in range(i, min(n, i + self.ngram_max)):
                length = j - i + 1
                if length >= self.ngram_min and self._can_complete(tokens[j], length):
                    term, surface = self._join(tokens[i : j + 1])
                    if term not in self.blacklist:
                        yield CandidateSpan(start=i, end=j + 1, term=term, surface=surface)
                # The token at j becomes non-final if the run grows
                if not self._can_continue(tokens[j], length):
                    break

    @staticmethod
    def _join(tokens: Sequence[AnnotatedToken]) -> Tuple[str, str]:
        surface = " ".join(tok.text for tok in tokens).lower()
        if all(tok.lemma is None for tok in tokens):
            return surface, surface
        term = " ".join(tok.lemma if tok.lemma is not None else tok.text for tok in tokens).lower()
        return term, surface

    def terms(self, tokens: Sequence[AnnotatedToken]) -> List[str]:
        """Convenience wrapper returning only the term strings."""
        return [span.term for span in self.spans(tokens)]


def build_grammar(config, stopwords: Optional[Set[str]] = None,
                  blacklist: Optional[Set[str]] = None) -> NounPhraseGrammar:
    """
    Build a grammar from a TermExtractionConfig.

    Args:
        config: TermExtractionConfig with tag sets and n-gram bounds
        stopwords: Loaded stop words
        blacklist: Combined blacklist (inline terms plus blacklist file)

    Returns:
        Configured NounPhraseGrammar
    """
    return NounPhraseGrammar(
        preceding_tags=set(config.preceding_tokens),
        middle_tags=set(config.middle_tokens),
        head_tags=set(config.head_tokens),
        ngram_min=config.ngram_min,
        ngram_max=config.ngram_max,
        head_token_final=config.head_token_final,
        stopwords=set(stopwords or ()),
        blacklist=set(blacklist or ()),
    )
