# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the import pipeline.
# =============================================================================

from typing import Any

from core.models import ConfidenceLevel


# =============================================================================
# Confidence Helpers
# =============================================================================

def confidence_level(score: float) -> ConfidenceLevel:
    """
    Bucket a detection confidence for display.

    Example:
        confidence_level(0.95)  # ConfidenceLevel.HIGH
        confidence_level(0.54)  # ConfidenceLevel.MEDIUM
    """
    if score >= 0.8:
        return ConfidenceLevel.HIGH
    if score >= 0.5:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def is_blank(value: Any) -> bool:
    """True for None and the empty string."""
    return value is None or value == ""


# =============================================================================
# Pipeline Errors
# =============================================================================

class ApplicationError(Exception):
    """
    Base class for errors raised by the import pipeline.

    Bad cell values are never raised; they are collected in the preview.
    This class is for capabilities the pipeline cannot provide at all
    (for example an export format without an implementation).

    Attributes:
        code: Machine-readable error code
        message: What went wrong
        suggestion: What the caller can do instead
        details: Extra context (format names, limits, ...)

    Example:
        raise ApplicationError(
            "Export format not supported: excel",
            code="EXPORT_FORMAT_UNSUPPORTED",
            suggestion="Use one of: csv, json",
        )
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        if self.suggestion:
            return f"[{self.code}] {self.message} ({self.suggestion})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Error as a dict for API responses and logs."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
