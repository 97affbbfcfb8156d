"""
Unit tests for TExEval files, taxonomies and taxonomy benchmarking.
"""

import json

import pytest

from term_extraction.exceptions import ResourceLoadError, TExEvalFormatError
from term_extraction.taxonomy.benchmark import count_matches, evaluate_taxonomy
from term_extraction.taxonomy.texeval import (
    DEFAULT_ROOT,
    Taxonomy,
    link_terms,
    links_to_taxonomy,
    load_links,
    load_taxonomy,
    parse_texeval_lines,
    read_texeval,
    taxonomy_to_links,
    write_texeval,
)


@pytest.fixture
def tree() -> Taxonomy:
    """a -> b -> {c, d}"""
    return Taxonomy(
        root="a",
        children=[Taxonomy(root="b", children=[Taxonomy(root="c"), Taxonomy(root="d")])],
    )


# ============================================================================
# Test Class: TExEval
# ============================================================================


@pytest.mark.unit
class TestTExEval:
    """Tests for reading and writing TExEval edges."""

    def test_parse(self):
        """Test fields are split on tab and lower-cased."""
        links = parse_texeval_lines(["Computer Science\tMachine Learning\n", "ai\tnlp\r\n"])
        assert links == {("computer science", "machine learning"), ("ai", "nlp")}

    def test_blank_lines_skipped(self):
        assert parse_texeval_lines(["\n", "a\tb\n", "   \n"]) == {("a", "b")}

    @pytest.mark.parametrize(
        "line",
        ["only one field", "a\tb\tc", "\tb", "a\t  "],
    )
    def test_bad_line(self, line):
        """Test lines without exactly two non-empty fields are rejected."""
        with pytest.raises(TExEvalFormatError) as exc_info:
            parse_texeval_lines(["ok\tfine", line])
        assert exc_info.value.line_number == 2
        assert "line 2" in exc_info.value.message

    def test_write_then_read(self, tmp_path):
        """Test written edges are sorted and read back unchanged."""
        path = tmp_path / "edges.tsv"
        write_texeval({("b", "c"), ("a", "b")}, path)
        assert path.read_text(encoding="utf-8") == "a\tb\nb\tc\n"
        assert read_texeval(path) == {("a", "b"), ("b", "c")}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ResourceLoadError):
            read_texeval(tmp_path / "missing.tsv")

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "edges.tsv"
        path.write_bytes(b"caf\xe9\tbar\n")
        with pytest.raises(ResourceLoadError):
            read_texeval(path)

    def test_link_terms(self):
        assert link_terms({("a", "b"), ("b", "c")}) == {"a", "b", "c"}


# ============================================================================
# Test Class: Taxonomy
# ============================================================================


@pytest.mark.unit
class TestTaxonomy:
    """Tests for the Taxonomy model and conversions."""

    def test_size_and_nodes(self, tree):
        assert tree.size() == 4
        assert [node.root for node in tree.nodes()] == ["a", "b", "c", "d"]

    def test_to_links(self, tree):
        assert taxonomy_to_links(tree) == {("a", "b"), ("b", "c"), ("b", "d")}

    def test_single_top_term_becomes_root(self, tree):
        """Test edges with one top-level term rebuild the same tree."""
        rebuilt = links_to_taxonomy({("b", "d"), ("a", "b"), ("b", "c")})
        assert rebuilt == tree

    def test_synthetic_root(self):
        """Test several top-level terms are placed under a synthetic root."""
        taxonomy = links_to_taxonomy({("x", "y"), ("a", "b")})
        assert taxonomy.root == DEFAULT_ROOT
        assert [child.root for child in taxonomy.children] == ["a", "x"]

    def test_cycle_edge_dropped(self):
        """Test an edge closing a cycle does not recurse forever."""
        taxonomy = links_to_taxonomy({("top", "a"), ("a", "b"), ("b", "a")})
        assert taxonomy_to_links(taxonomy) == {("top", "a"), ("a", "b")}

    def test_json_alias(self, tmp_path):
        """Test the camelCase linkScore field is read from JSON."""
        path = tmp_path / "taxonomy.json"
        path.write_text(
            json.dumps({"root": "A", "children": [{"root": "B", "linkScore": 0.5}]}),
            encoding="utf-8",
        )
        taxonomy = load_taxonomy(path)
        assert taxonomy.children[0].link_score == 0.5
        assert load_links(path) == {("a", "b")}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "taxonomy.json"
        path.write_text('{"children": []}', encoding="utf-8")
        with pytest.raises(ResourceLoadError):
            load_taxonomy(path)

    def test_load_links_texeval(self, tmp_path):
        path = tmp_path / "gold.txt"
        path.write_text("A\tB\n", encoding="utf-8")
        assert load_links(path) == {("a", "b")}


# ============================================================================
# Test Class: Benchmark
# ============================================================================


@pytest.mark.unit
class TestEvaluateTaxonomy:
    """Tests for evaluate_taxonomy."""

    def test_scores(self, tree):
        """Test precision over tree nodes and recall over gold edges."""
        scores = evaluate_taxonomy(tree, {("a", "b")})
        assert scores.matches == 1
        assert scores.precision == pytest.approx(0.25)
        assert scores.recall == pytest.approx(1.0)
        assert scores.f_measure == pytest.approx(0.4)
        assert scores.f_and_m == pytest.approx(0.5)

    def test_case_insensitive_matches(self):
        taxonomy = Taxonomy(root="AI", children=[Taxonomy(root="NLP")])
        assert count_matches(taxonomy, {("ai", "nlp")}) == 1

    def test_empty_gold(self, tree):
        """Test an empty gold set gives zero recall without dividing by zero."""
        scores = evaluate_taxonomy(tree, set())
        assert scores.recall == 0.0
        assert scores.f_measure == 0.0
        assert scores.f_and_m == 0.0

    def test_no_matches(self, tree):
        scores = evaluate_taxonomy(tree, {("x", "y")})
        assert scores.precision == 0.0
        assert scores.f_measure == 0.0

    def test_to_table(self, tree):
        """Test the Markdown table lists all four scores."""
        table = evaluate_taxonomy(tree, {("a", "b")}).to_table()
        assert "| Precision | 0.2500 |" in table
        assert "| Recall    | 1.0000 |" in table
        assert "| F-Measure | 0.4000 |" in table
        assert "| F&M       | 0.5000 |" in table
