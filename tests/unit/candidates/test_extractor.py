"""
Unit tests for per-document candidate extraction and word lists.
"""

import datetime

import pytest

from term_extraction.annotation.simple import PreTaggedAnnotator
from term_extraction.candidates.extractor import CandidateExtractor
from term_extraction.candidates.grammar import NounPhraseGrammar
from term_extraction.candidates.stopwords import STOPWORDS_EN, load_stopwords, load_word_list
from term_extraction.exceptions import ResourceLoadError
from term_extraction.models.document import Document


@pytest.fixture
def extractor() -> CandidateExtractor:
    return CandidateExtractor(
        NounPhraseGrammar(
            preceding_tags={"JJ", "NN", "NNS"},
            middle_tags={"IN"},
            head_tags={"NN", "NNS"},
        )
    )


@pytest.mark.unit
class TestCandidateExtractor:
    """Tests for CandidateExtractor.extract."""

    def test_counts_terms(self, extractor):
        """Test repeated terms are counted per occurrence."""
        doc = Document(id="d1", contents="graph/NN is/VBZ a/DT graph/NN")
        result = extractor.extract(doc, PreTaggedAnnotator())
        assert result.counts == {"graph": 2}
        assert result.token_count == 4
        assert result.document_id == "d1"

    def test_records_variants(self, extractor):
        """Test surface forms differing from the lemma form are kept."""
        doc = Document(id="d1", contents="neural/JJ networks/NNS/network")
        result = extractor.extract(doc, PreTaggedAnnotator())
        assert result.counts == {"neural network": 1, "network": 1}
        assert result.variants == {
            "neural network": {"neural networks"},
            "network": {"networks"},
        }

    def test_carries_date(self, extractor):
        """Test the document date is passed through."""
        doc = Document(id="d1", contents="graph/NN", date=datetime.date(2020, 1, 1))
        assert extractor.extract(doc, PreTaggedAnnotator()).date == datetime.date(2020, 1, 1)

    def test_empty_document(self, extractor):
        """Test an empty document gives no candidates."""
        result = extractor.extract(Document(id="d1"), PreTaggedAnnotator())
        assert not result.counts
        assert result.token_count == 0


@pytest.mark.unit
class TestWordLists:
    """Tests for stop word and blacklist loading."""

    def test_builtin_stopwords(self):
        """Test the built-in list is used without a file."""
        words = load_stopwords()
        assert "the" in words
        assert words == set(STOPWORDS_EN)

    def test_load_file(self, tmp_path):
        """Test entries are stripped, lower-cased and blank lines skipped."""
        path = tmp_path / "stop.txt"
        path.write_text("The\n\n  Of \nmodel\n", encoding="utf-8")
        assert load_stopwords(path) == {"the", "of", "model"}

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ResourceLoadError."""
        with pytest.raises(ResourceLoadError, match="blacklist"):
            load_word_list(tmp_path / "missing.txt", resource="blacklist file")

    def test_not_utf8(self, tmp_path):
        """Test a file that is not UTF-8 raises ResourceLoadError."""
        path = tmp_path / "stopwords.txt"
        path.write_bytes(b"caf\xe9\nthe\n")
        with pytest.raises(ResourceLoadError, match="stop word file"):
            load_stopwords(path)
