# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# Typed wrapper around the Supabase client used to persist confirmed
# imports. One client instance is shared across the application.
#
# Only lib/sinks.py talks to this module; the detection / transformation
# pipeline never touches the database.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   SupabaseClient.insert_rows("imported_data", rows)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, create_client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Singleton wrapper for Supabase inserts.

    Example:
        SupabaseClient.insert_rows(
            "imported_data",
            [{"date": "2024-01-15T00:00:00", "store_name": "Milano", ...}],
        )
    """

    _instance: Client | None = None

    @classmethod
    def is_configured(cls) -> bool:
        """True when URL and service key are both set."""
        return bool(settings.SUPABASE_URL and settings.SUPABASE_SERVICE_KEY)

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Raises:
            SupabaseClientError: If credentials are missing or client creation fails
        """
        if cls._instance is None:
            if not cls.is_configured():
                raise SupabaseClientError(
                    message="Supabase is not configured",
                    code="CLIENT_NOT_CONFIGURED",
                    suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
                )
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY,
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
                ) from e
        return cls._instance

    @classmethod
    def insert_rows(cls, table: str, rows: list[dict[str, Any]]) -> int:
        """
        Insert rows into a table.

        Args:
            table: Target table name
            rows: JSON-serializable row dicts

        Returns:
            Number of rows the database reported as inserted

        Raises:
            SupabaseClientError: If the insert fails
        """
        client = cls.get_client()
        try:
            response = client.table(table).insert(rows).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert {len(rows)} rows into '{table}': {e}",
                code="INSERT_FAILED",
                suggestion=f"Check that table '{table}' exists and its columns match the row fields",
                details={"table": table, "row_count": len(rows)},
            ) from e

        inserted = len(response.data or [])
        logger.debug(f"Inserted {inserted} rows into {table}")
        return inserted
