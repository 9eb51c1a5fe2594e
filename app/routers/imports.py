# =============================================================================
# app/routers/imports.py - Import Wizard Endpoints
# =============================================================================
# HTTP surface of the import pipeline. The wizard client has already parsed
# the uploaded file into rows; these endpoints:
#
#   POST /imports/preview   detect schema, transform, validate -> preview
#   POST /imports/validate  business plausibility warnings
#   POST /imports/export    canonical rows as CSV / JSON
#   GET  /imports/template  sample CSV to fill in
#   POST /imports/confirm   persist confirmed rows through the row sink
# =============================================================================

import logging
from typing import Any, Literal

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from app.config import settings
from app.dependencies import DetectionConfigDep, RowSinkDep, TemplateEmitterDep
from app.exceptions import (
    ImportStoreError,
    NothingToImportError,
    PersistenceUnavailableError,
    TooManyRowsError,
)
from core.models import BusinessRuleReport, DataSource, FieldMapping, SinkResult
from lib.business_rules import validate_business_rules
from lib.exporter import export_data
from lib.mapper import create_import_preview
from lib.transformers import parse_date
from lib.utils import confidence_level

logger = logging.getLogger(__name__)

router = APIRouter()

EXPORT_MEDIA_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
}


# =============================================================================
# Request Models
# =============================================================================

class PreviewRequest(BaseModel):
    """Rows parsed from an uploaded file plus where they came from."""
    source: DataSource
    rows: list[dict[str, Any]] = Field(default_factory=list)


class RowsRequest(BaseModel):
    """Canonical rows (as returned in a preview)."""
    rows: list[dict[str, Any]] = Field(default_factory=list)


class ConfirmRequest(BaseModel):
    """Rows the user confirmed, with the mappings that produced them."""
    rows: list[dict[str, Any]] = Field(default_factory=list)
    detected_fields: list[FieldMapping] = Field(default_factory=list)
    user_id: str
    company_id: str


# =============================================================================
# Helper Functions
# =============================================================================

def _check_row_limit(rows: list[dict[str, Any]]) -> None:
    if len(rows) > settings.MAX_IMPORT_ROWS:
        raise TooManyRowsError(len(rows), settings.MAX_IMPORT_ROWS)


def _revive_dates(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Canonical rows travel as JSON; turn their ISO dates back into datetimes."""
    revived = []
    for row in rows:
        row = dict(row)
        if isinstance(row.get("date"), str):
            row["date"] = parse_date(row["date"])
        revived.append(row)
    return revived


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/preview")
async def preview_import(request: PreviewRequest, config: DetectionConfigDep):
    """
    Build an import preview.

    Returns the preview plus, for the wizard:
    - a confidence level (high / medium / low) per detected field
    - the first 5 errors and how many more there are
    - whether the import can be confirmed (at least one valid row)
    """
    _check_row_limit(request.rows)

    preview = create_import_preview(request.source, request.rows, config)

    content = preview.model_dump(mode="json")
    for field in content["detected_fields"]:
        field["confidence_level"] = confidence_level(field["confidence"]).value

    shown, more = preview.error_summary()
    content["error_summary"] = {
        "errors": [error.model_dump(mode="json") for error in shown],
        "more": more,
    }
    content["can_confirm"] = preview.can_confirm

    return JSONResponse(content=content)


@router.post("/validate", response_model=BusinessRuleReport)
async def validate_import(request: RowsRequest):
    """Check canonical rows against business plausibility rules."""
    _check_row_limit(request.rows)
    return validate_business_rules(_revive_dates(request.rows))


@router.post("/export")
async def export_import(
    request: RowsRequest,
    format: Literal["csv", "json", "excel"] = Query(default="csv", description="Export format"),
):
    """
    Export canonical rows.

    Excel is not implemented and answers 501.
    """
    _check_row_limit(request.rows)

    body = export_data(request.rows, format)
    filename = f"import_export.{format}"

    return Response(
        content=body,
        media_type=EXPORT_MEDIA_TYPES[format],
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/template")
async def download_template(emitter: TemplateEmitterDep):
    """Download a sample file with column names the detector recognises."""
    return Response(
        content=emitter.emit(),
        media_type=emitter.media_type,
        headers={"Content-Disposition": f"attachment; filename={emitter.filename}"},
    )


@router.post("/confirm", response_model=SinkResult)
async def confirm_import(request: ConfirmRequest, sink: RowSinkDep):
    """
    Persist confirmed rows.

    Refuses an empty confirmation. Storage failures are reported with the
    sink's error message.
    """
    if not request.rows:
        raise NothingToImportError()
    _check_row_limit(request.rows)
    if sink is None:
        raise PersistenceUnavailableError()

    result = sink.store(
        _revive_dates(request.rows),
        request.detected_fields,
        user_id=request.user_id,
        company_id=request.company_id,
    )
    if not result.success:
        raise ImportStoreError(result.error or "unknown error")

    logger.info(f"Confirmed import of {result.stored_rows} rows for company {request.company_id}")
    return result
