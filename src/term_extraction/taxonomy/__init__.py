"""
Taxonomy interchange (TExEval) and benchmarking.
"""

from .benchmark import BenchmarkScores, count_matches, evaluate_taxonomy
from .texeval import (
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

__all__ = [
    "BenchmarkScores",
    "count_matches",
    "evaluate_taxonomy",
    "Taxonomy",
    "link_terms",
    "links_to_taxonomy",
    "load_links",
    "load_taxonomy",
    "parse_texeval_lines",
    "read_texeval",
    "taxonomy_to_links",
    "write_texeval",
]
