# =============================================================================
# lib/sinks.py - Import Boundaries (persistence and templates)
# =============================================================================
# The pipeline in lib/mapper.py is pure. Side effects live behind two small
# capabilities handed in by the caller:
#
#   - RowSink: persists confirmed canonical rows, reports success/failure
#   - TemplateEmitter: produces a downloadable template for the import wizard
#
# Implementations:
#   - SupabaseRowSink: stamps rows with ownership metadata, inserts them
#   - InMemoryRowSink: keeps rows in a list (tests, local runs)
#   - CsvTemplateEmitter: sample CSV with the headers the detector knows
# =============================================================================

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Protocol

from core.models import FieldMapping, SinkResult
from lib.exporter import export_data

logger = logging.getLogger(__name__)

IMPORT_SOURCE_TAG = "manual_import"


class RowSink(Protocol):
    """Somewhere confirmed rows can be stored."""

    def store(
        self,
        rows: list[dict[str, Any]],
        mappings: list[FieldMapping],
        user_id: str,
        company_id: str,
    ) -> SinkResult:
        ...


class TemplateEmitter(Protocol):
    """Produces template file contents for users to fill in."""

    filename: str
    media_type: str

    def emit(self) -> bytes:
        ...


# =============================================================================
# Row Sinks
# =============================================================================

def _json_ready(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def stamp_rows(
    rows: list[dict[str, Any]],
    user_id: str,
    company_id: str,
    imported_at: datetime | None = None,
) -> list[dict[str, Any]]:
    """
    Attach ownership and provenance fields to canonical rows.

    Returns new dicts; the input rows are not modified.
    """
    imported_at = imported_at or datetime.now(timezone.utc)
    return [
        {
            **{key: _json_ready(value) for key, value in row.items()},
            "user_id": user_id,
            "company_id": company_id,
            "imported_at": imported_at.isoformat(),
            "source": IMPORT_SOURCE_TAG,
        }
        for row in rows
    ]


class SupabaseRowSink:
    """Persist rows into a Supabase table."""

    def __init__(self, table: str = "imported_data", client: Any = None):
        if client is None:
            from lib.supabase_client import SupabaseClient
            client = SupabaseClient
        self.table = table
        self.client = client

    def store(
        self,
        rows: list[dict[str, Any]],
        mappings: list[FieldMapping],
        user_id: str,
        company_id: str,
    ) -> SinkResult:
        payload = stamp_rows(rows, user_id, company_id)
        try:
            stored = self.client.insert_rows(self.table, payload)
        except Exception as e:
            logger.error(f"Error storing imported data: {e}")
            return SinkResult(success=False, error=str(e))

        logger.info(
            f"Stored {stored} imported rows for company {company_id} "
            f"({len(mappings)} mapped fields)"
        )
        return SinkResult(success=True, stored_rows=stored)


class InMemoryRowSink:
    """Keep stored rows in memory."""

    def __init__(self):
        self.rows: list[dict[str, Any]] = []

    def store(
        self,
        rows: list[dict[str, Any]],
        mappings: list[FieldMapping],
        user_id: str,
        company_id: str,
    ) -> SinkResult:
        stamped = stamp_rows(rows, user_id, company_id)
        self.rows.extend(stamped)
        return SinkResult(success=True, stored_rows=len(stamped))


# =============================================================================
# Templates
# =============================================================================

TEMPLATE_HEADERS = [
    "data",
    "negozio",
    "canale",
    "spesa_pubblicitaria",
    "fatturato",
    "ordini",
    "conversioni",
    "impressions",
    "clicks",
    "stato",
]

TEMPLATE_SAMPLE_ROWS = [
    ["2024-01-15", "Milano Centro", "google", "1500.00", "8500.00", "45", "38", "125000", "3200", "attivo"],
    ["2024-01-15", "Roma EUR", "facebook", "1200.00", "6800.00", "32", "28", "98000", "2800", "attivo"],
    ["2024-01-16", "Milano Centro", "google", "1600.00", "9200.00", "48", "42", "132000", "3400", "attivo"],
]


class CsvTemplateEmitter:
    """Sample import file using column names the detector recognises."""

    filename = "template_importazione_dati.csv"
    media_type = "text/csv"

    def rows(self) -> list[dict[str, str]]:
        return [dict(zip(TEMPLATE_HEADERS, values)) for values in TEMPLATE_SAMPLE_ROWS]

    def emit(self) -> bytes:
        return export_data(self.rows(), "csv").encode("utf-8")
