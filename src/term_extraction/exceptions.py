"""Custom exceptions for term extraction."""

from typing import Any, Dict, Optional


class TermExtractionError(Exception):
    """
    Base exception for all term extraction failures.

    Attributes:
        message: Human-readable error description.
        details: Additional context for logging.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(TermExtractionError):
    """Raised when configuration options are inconsistent with each other."""


class ResourceLoadError(TermExtractionError):
    """
    Raised when a resource needed before any work starts cannot be loaded.

    Covers stop-word files, blacklist files and linguistic models.
    """

    def __init__(self, resource: str, reason: str):
        self.resource = resource
        self.reason = reason
        super().__init__(
            f"Failed to load {resource}: {reason}",
            details={"resource": resource, "reason": reason},
        )


class DocumentAnnotationError(TermExtractionError):
    """Raised when a single document cannot be annotated or processed."""

    def __init__(self, document_id: str, reason: str):
        self.document_id = document_id
        super().__init__(
            f"Failed to process document {document_id}: {reason}",
            details={"document_id": document_id},
        )


class SchedulingTimeoutError(TermExtractionError):
    """Raised when document tasks do not finish within the configured timeout."""

    def __init__(self, timeout_seconds: float, pending: int):
        self.timeout_seconds = timeout_seconds
        self.pending = pending
        super().__init__(
            f"Document processing did not finish within {timeout_seconds}s "
            f"({pending} tasks pending)",
            details={"timeout_seconds": timeout_seconds, "pending": pending},
        )


class ReferenceUnavailableError(TermExtractionError):
    """Raised when the reference corpus statistics cannot be loaded."""


class FeatureUnavailableError(TermExtractionError):
    """
    Raised when a feature cannot be computed because its data is missing.

    Only the feature named here is affected; other features stay usable.
    """

    def __init__(self, feature: str, reason: str):
        self.feature = feature
        self.reason = reason
        super().__init__(
            f"Feature {feature} is unavailable: {reason}",
            details={"feature": feature, "reason": reason},
        )


class TExEvalFormatError(TermExtractionError):
    """Raised on a TExEval line that is not exactly two tab-separated fields."""

    def __init__(self, line: str, line_number: Optional[int] = None):
        self.line = line
        self.line_number = line_number
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(
            f"Bad line{location}: {line!r}",
            details={"line": line, "line_number": line_number},
        )
