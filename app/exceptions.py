# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Bad cells never reach this layer: the pipeline returns them as data inside
# the preview. Only request-level problems and unsupported capabilities
# become HTTP errors.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.utils import ApplicationError


class SmartImportException(Exception):
    """
    Base exception for the Smart Import API.

    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SMART_IMPORT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Import Exceptions
# =============================================================================

class TooManyRowsError(SmartImportException):
    """Raised when a request carries more rows than allowed."""

    def __init__(self, row_count: int, max_rows: int):
        super().__init__(
            message=f"Too many rows: {row_count:,} (max: {max_rows:,})",
            code="TOO_MANY_ROWS",
            status_code=413,
            suggestion=f"Split the import into batches of at most {max_rows:,} rows",
            details={"row_count": row_count, "max_rows": max_rows}
        )


class NothingToImportError(SmartImportException):
    """Raised when an import is confirmed without any valid rows."""

    def __init__(self):
        super().__init__(
            message="No valid rows to import",
            code="NOTHING_TO_IMPORT",
            status_code=400,
            suggestion="Fix the errors shown in the preview so at least one row is valid",
        )


class PersistenceUnavailableError(SmartImportException):
    """Raised when no row sink is configured."""

    def __init__(self):
        super().__init__(
            message="Import storage is not configured",
            code="PERSISTENCE_UNAVAILABLE",
            status_code=503,
            suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY to enable confirmed imports",
        )


class ImportStoreError(SmartImportException):
    """Raised when the row sink reports a failure."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to store imported data: {error}",
            code="IMPORT_STORE_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def smart_import_exception_handler(
    request: Request,
    exc: SmartImportException
) -> JSONResponse:
    """
    Convert SmartImportException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def application_error_handler(
    request: Request,
    exc: ApplicationError
) -> JSONResponse:
    """
    Convert pipeline errors to JSON responses.

    The only pipeline error is an unsupported capability, so these map to
    501 Not Implemented.
    """
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=501, content=content)
