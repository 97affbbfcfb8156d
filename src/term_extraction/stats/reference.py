"""
Reference (background) corpus statistics.

A reference corpus is a FrequencyStats JSON file computed over general
language text. Features such as weirdness compare in-domain frequencies
against it.
"""

from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from ..exceptions import ReferenceUnavailableError
from .frequency import FrequencyStats

logger = structlog.get_logger(__name__)


def load_reference_stats(path: Optional[Path]) -> FrequencyStats:
    """
    Load reference corpus statistics.

    Args:
        path: FrequencyStats JSON file, or None if none is configured

    Returns:
        Validated FrequencyStats

    Raises:
        ReferenceUnavailableError: If no path is configured, the file cannot be
            read or parsed, violates the statistics invariants, or has no tokens
    """
    if path is None:
        raise ReferenceUnavailableError("No reference corpus configured")

    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReferenceUnavailableError(
            f"Cannot read reference corpus {path}: {e}", details={"path": str(path)}
        ) from e

    try:
        stats = FrequencyStats.model_validate_json(text)
    except ValidationError as e:
        raise ReferenceUnavailableError(
            f"Malformed reference corpus {path}: {e.error_count()} validation errors",
            details={"path": str(path), "error_count": e.error_count()},
        ) from e

    if stats.tokens <= 0:
        raise ReferenceUnavailableError(
            f"Reference corpus {path} has no tokens", details={"path": str(path)}
        )

    logger.info(
        "reference_stats_loaded",
        path=str(path),
        terms=len(stats.term_frequency),
        tokens=stats.tokens,
        documents=stats.documents,
    )
    return stats


def save_frequency_stats(stats: FrequencyStats, path: Path) -> None:
    """
    Write statistics in the reference corpus format.

    Args:
        stats: Statistics to write
        path: Output JSON file
    """
    Path(path).write_text(stats.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    logger.info("frequency_stats_saved", path=str(path), terms=len(stats.term_frequency))
