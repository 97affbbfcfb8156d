"""
Taxonomy model and the TExEval interchange format.

TExEval files hold one ``parent<TAB>child`` edge per line. Terms are
compared case-insensitively, so both fields are lower-cased on read. Blank
lines are ignored; any other line must have exactly two non-empty
tab-separated fields.
"""

import json
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ResourceLoadError, TExEvalFormatError

logger = structlog.get_logger(__name__)

Link = Tuple[str, str]

DEFAULT_ROOT = "root"


class Taxonomy(BaseModel):
    """
    A node of a term taxonomy and its subtree.

    Examples:
        >>> taxonomy = Taxonomy(root="ai", children=[Taxonomy(root="machine learning")])
        >>> taxonomy.size()
        2
    """

    model_config = ConfigDict(populate_by_name=True)

    root: str = Field(description="Term at this node")
    score: float = Field(0.0, description="Term score")
    link_score: float = Field(
        0.0, alias="linkScore", description="Score of the edge from the parent"
    )
    children: List["Taxonomy"] = Field(default_factory=list)

    def size(self) -> int:
        """Number of nodes in the subtree, this one included."""
        return 1 + sum(child.size() for child in self.children)

    def nodes(self) -> Iterator["Taxonomy"]:
        """Pre-order traversal of the subtree."""
        yield self
        for child in self.children:
            yield from child.nodes()


def parse_texeval_lines(lines: Iterable[str]) -> Set[Link]:
    """
    Parse TExEval edges.

    Args:
        lines: Lines of a TExEval file (trailing newlines allowed)

    Returns:
        Set of lower-cased (parent, child) pairs

    Raises:
        TExEvalFormatError: On a non-blank line that is not exactly two
            non-empty tab-separated fields
    """
    links: Set[Link] = set()
    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        fields = line.split("\t")
        if len(fields) != 2 or not fields[0].strip() or not fields[1].strip():
            raise TExEvalFormatError(line, line_number)
        links.add((fields[0].strip().lower(), fields[1].strip().lower()))
    return links


def read_texeval(path: Path) -> Set[Link]:
    """
    Read a TExEval file.

    Raises:
        ResourceLoadError: If the file cannot be read
        TExEvalFormatError: On a malformed line
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            links = parse_texeval_lines(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceLoadError(f"TExEval file {path}", str(e)) from e

    logger.debug("texeval_loaded", path=str(path), links=len(links))
    return links


def write_texeval(links: Iterable[Link], path: Path) -> None:
    """Write edges as sorted ``parent<TAB>child`` lines."""
    with open(path, "w", encoding="utf-8") as f:
        for parent, child in sorted(set(links)):
            f.write(f"{parent}\t{child}\n")


def link_terms(links: Iterable[Link]) -> Set[str]:
    """Every term appearing on either side of an edge."""
    terms: Set[str] = set()
    for parent, child in links:
        terms.add(parent)
        terms.add(child)
    return terms


def taxonomy_to_links(taxonomy: Taxonomy) -> Set[Link]:
    """All lower-cased parent-child edges of a taxonomy."""
    links: Set[Link] = set()
    for node in taxonomy.nodes():
        for child in node.children:
            links.add((node.root.lower(), child.root.lower()))
    return links


def links_to_taxonomy(links: Iterable[Link], root: Optional[str] = None) -> Taxonomy:
    """
    Build a taxonomy tree from edges.

    Terms that never appear as a child are top-level terms. A single top-level
    term becomes the root; several are placed under a synthetic root named
    ``root`` (default ``"root"``). Edges that would close a cycle are dropped.

    Args:
        links: (parent, child) edges
        root: Name of the synthetic root, forced even for a single top-level term

    Returns:
        Taxonomy with children in sorted order
    """
    edges = sorted(set(links))
    children = {}
    for parent, child in edges:
        children.setdefault(parent, []).append(child)
    child_terms = {child for _, child in edges}
    top = sorted(link_terms(edges) - child_terms)

    def build(term: str, ancestors: Set[str]) -> Taxonomy:
        path = ancestors | {term}
        return Taxonomy(
            root=term,
            children=[build(c, path) for c in children.get(term, []) if c not in path],
        )

    if root is None and len(top) == 1:
        return build(top[0], set())
    return Taxonomy(root=root or DEFAULT_ROOT, children=[build(t, set()) for t in top])


def load_taxonomy(path: Path) -> Taxonomy:
    """
    Load a taxonomy from JSON.

    Raises:
        ResourceLoadError: If the file cannot be read or is not a valid taxonomy
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return Taxonomy.model_validate(data)
    except (OSError, ValueError) as e:
        raise ResourceLoadError(f"taxonomy {path}", str(e)) from e


def load_links(path: Path) -> Set[Link]:
    """
    Load gold edges from a taxonomy JSON file (``.json``) or a TExEval file.
    """
    if Path(path).suffix.lower() == ".json":
        return taxonomy_to_links(load_taxonomy(path))
    return read_texeval(path)
