"""
Evaluation of an extracted taxonomy against gold edges.
"""

import math
from typing import Set

import structlog
from pydantic import BaseModel, Field

from .texeval import Link, Taxonomy

logger = structlog.get_logger(__name__)


class BenchmarkScores(BaseModel):
    """
    Edge-level precision and recall of an extracted taxonomy.

    Precision is measured against the node count of the extracted tree, so a
    root with no matching edges still costs one node.
    """

    matches: int = Field(description="Extracted edges present in the gold set", ge=0)
    size: int = Field(description="Nodes in the extracted taxonomy", ge=1)
    gold_size: int = Field(description="Edges in the gold set", ge=0)
    precision: float
    recall: float
    f_measure: float
    f_and_m: float = Field(description="Fowlkes-Mallows index, sqrt(P * R)")

    def to_table(self) -> str:
        """Render the scores as a Markdown table."""
        rows = [
            ("Precision", self.precision),
            ("Recall", self.recall),
            ("F-Measure", self.f_measure),
            ("F&M", self.f_and_m),
        ]
        lines = ["|-----------|--------|"]
        lines.extend(f"| {name:<9} | {value:.4f} |" for name, value in rows)
        return "\n".join(lines)


def count_matches(taxonomy: Taxonomy, gold: Set[Link]) -> int:
    """Number of parent->child edges of the tree found in ``gold`` (case-insensitive)."""
    return sum(
        1
        for node in taxonomy.nodes()
        for child in node.children
        if (node.root.lower(), child.root.lower()) in gold
    )


def evaluate_taxonomy(extracted: Taxonomy, gold: Set[Link]) -> BenchmarkScores:
    """
    Score an extracted taxonomy.

    Args:
        extracted: Taxonomy to evaluate
        gold: Lower-cased gold (parent, child) edges

    Returns:
        BenchmarkScores (recall is 0 for an empty gold set)

    Examples:
        >>> tree = Taxonomy(root="a", children=[Taxonomy(root="b", children=[
        ...     Taxonomy(root="c"), Taxonomy(root="d")])])
        >>> scores = evaluate_taxonomy(tree, {("a", "b")})
        >>> scores.precision, scores.recall, scores.f_measure, scores.f_and_m
        (0.25, 1.0, 0.4, 0.5)
    """
    matches = count_matches(extracted, gold)
    size = extracted.size()
    precision = matches / size
    recall = matches / len(gold) if gold else 0.0
    if precision == 0.0 and recall == 0.0:
        f_measure = 0.0
    else:
        f_measure = 2.0 * precision * recall / (precision + recall)

    scores = BenchmarkScores(
        matches=matches,
        size=size,
        gold_size=len(gold),
        precision=precision,
        recall=recall,
        f_measure=f_measure,
        f_and_m=math.sqrt(precision * recall),
    )
    logger.info(
        "taxonomy_evaluated",
        matches=matches,
        size=size,
        gold_size=len(gold),
        precision=round(precision, 4),
        recall=round(recall, 4),
    )
    return scores
