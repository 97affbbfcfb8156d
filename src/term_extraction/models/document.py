"""
Document and token models consumed by the extraction pipeline.
"""

import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """
    A unit of text in the corpus.

    Documents are owned by the document source and are read-only to the
    extraction pipeline.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique document identifier")
    contents: str = Field(default="", description="Plain text of the document")
    date: Optional[datetime.date] = Field(
        None, description="Publication date, used for temporal features"
    )
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")


@dataclass(frozen=True)
class AnnotatedToken:
    """A token with its part-of-speech tag and optional lemma."""

    text: str
    tag: str
    lemma: Optional[str] = None
