# =============================================================================
# core/models/mapping.py - Import Mapping Schemas
# =============================================================================
# These models define the structures that flow through the import pipeline
# (lib/detector.py -> lib/mapper.py):
#
# - FieldType: semantic meaning of a source column
# - SchemaDetectionResult: what the detector thinks a column is
# - FieldMapping: source column -> canonical target field + converter
# - ImportErrorRecord: a per-cell problem found while transforming
# - ImportPreview: the report shown to the user before confirming an import
# - DetectionConfig: every confidence threshold used by the pipeline
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.json_schema import SkipJsonSchema


# =============================================================================
# Enums
# =============================================================================

class FieldType(str, Enum):
    """
    Semantic meaning of a source column.

    Declaration order matters: name patterns are tried in this order and
    the first type that matches wins a tie.
    """
    DATE = "date"
    AMOUNT = "amount"          # Money (spend, revenue, price)
    STORE = "store"            # Store / point of sale
    CHANNEL = "channel"        # Marketing channel or source
    STATUS = "status"
    NUMBER = "number"          # Counts (orders, clicks, impressions)
    TEXT = "text"              # Free text, never mapped
    UNKNOWN = "unknown"        # Could not determine


class ConfidenceLevel(str, Enum):
    """Traffic-light bucket for a detection confidence."""
    HIGH = "high"       # >= 0.8 (green)
    MEDIUM = "medium"   # >= 0.5 (yellow)
    LOW = "low"         # < 0.5 (red)


# =============================================================================
# Detection Configuration
# =============================================================================

class DetectionConfig(BaseModel):
    """
    Confidence heuristics used by detection, mapping and preview.

    Defaults reproduce the stock behaviour. Tests and deployments can
    override single values to probe or tune boundaries.

    Example:
        config = DetectionConfig(mapping_threshold=0.6)
        preview = create_import_preview(source, rows, config=config)
    """

    model_config = ConfigDict(frozen=True)

    # Name-based detection
    name_match_confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    boost_ceiling: float = Field(
        default=0.9, ge=0.0, le=1.0,
        description="Name confidence must be below this to get an agreement boost"
    )
    agreement_boost: float = Field(default=0.15, ge=0.0, le=1.0)
    max_confidence: float = Field(default=0.95, ge=0.0, le=1.0)

    # Value-based detection
    value_fallback_factor: float = Field(
        default=0.6, ge=0.0, le=1.0,
        description="Multiplier applied when only values identified the column"
    )
    date_ratio_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    numeric_ratio_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    date_value_confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    amount_value_confidence: float = Field(default=0.85, ge=0.0, le=1.0)
    number_value_confidence: float = Field(default=0.75, ge=0.0, le=1.0)
    text_value_confidence: float = Field(default=0.5, ge=0.0, le=1.0)

    # Mapping
    mapping_threshold: float = Field(
        default=0.5, ge=0.0, le=1.0,
        description="Mappings are created only for confidence strictly above this"
    )
    collision_policy: Literal["last_applied", "highest_confidence"] = Field(
        default="last_applied",
        description=(
            "How mappings sharing a target field resolve. 'last_applied' keeps "
            "the last mapping in detection order (the least confident one); "
            "'highest_confidence' lets the most confident mapping win."
        )
    )

    # Sampling and preview sizes
    sample_rows: int = Field(default=10, ge=1)
    sample_values_kept: int = Field(default=3, ge=0)
    preview_rows: int = Field(default=10, ge=0)


# =============================================================================
# Data Source
# =============================================================================

class ApiConfig(BaseModel):
    """Connection settings for API-backed sources (not used by the pipeline)."""
    api_key: str | None = None
    base_id: str | None = None
    table_id: str | None = None
    sheet_id: str | None = None


class DataSource(BaseModel):
    """
    Where the rows came from. Pure metadata, carried into the preview.

    Example:
        {"id": "upload-1", "name": "vendite_gennaio.csv", "type": "csv"}
    """
    id: str
    name: str
    type: Literal["airtable", "notion", "google_sheets", "csv", "json"]
    api_config: ApiConfig | None = None


# =============================================================================
# Detection and Mapping
# =============================================================================

class SchemaDetectionResult(BaseModel):
    """
    Detector verdict for a single source column.

    Example:
        {
            "field_name": "fatturato",
            "detected_type": "amount",
            "confidence": 0.8,
            "sample_values": [],
            "suggested_mapping": "ad_spend"
        }
    """

    field_name: str = Field(..., description="Source column name")
    detected_type: FieldType = Field(default=FieldType.UNKNOWN)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    sample_values: list[Any] = Field(
        default_factory=list,
        description="First few sampled values (for display)"
    )
    suggested_mapping: str = Field(
        default="",
        description="Target field name, empty when the column should not be mapped"
    )


class FieldMapping(BaseModel):
    """
    Binding from a source column to a canonical target field.

    `transform` converts one raw value; it is not serialized.
    """

    source_field: str
    target_field: str
    field_type: FieldType
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    transform: SkipJsonSchema[Callable[[Any], Any] | None] = Field(default=None, exclude=True)


class ImportErrorRecord(BaseModel):
    """A value that could not be converted. Collected, never raised."""

    row: int = Field(..., ge=0, description="0-based index of the raw row")
    field: str = Field(..., description="Source column name")
    error: str
    value: Any = None


# =============================================================================
# Preview
# =============================================================================

class ImportStats(BaseModel):
    """Counts over the full (untruncated) dataset."""
    total_rows: int = Field(default=0, ge=0)
    valid_rows: int = Field(default=0, ge=0)
    invalid_rows: int = Field(default=0, ge=0)


class ImportPreview(BaseModel):
    """
    Report shown to the user before an import is confirmed.

    raw_data and transformed_data are truncated for display, stats and
    errors are not.
    """

    model_config = ConfigDict(frozen=True)

    source: DataSource
    raw_data: list[dict[str, Any]] = Field(default_factory=list)
    detected_fields: list[FieldMapping] = Field(default_factory=list)
    transformed_data: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[ImportErrorRecord] = Field(default_factory=list)
    stats: ImportStats = Field(default_factory=ImportStats)

    @property
    def can_confirm(self) -> bool:
        """Import can only be confirmed when at least one row is valid."""
        return self.stats.valid_rows > 0

    def error_summary(self, limit: int = 5) -> tuple[list[ImportErrorRecord], int]:
        """
        First `limit` errors plus how many were left out.

        Example:
            shown, more = preview.error_summary()
            # render shown, then "+{more} more" when more > 0
        """
        return self.errors[:limit], max(0, len(self.errors) - limit)


class BusinessRuleReport(BaseModel):
    """Plausibility warnings for canonical rows. Warnings never block an import."""
    valid: bool = True
    warnings: list[str] = Field(default_factory=list)


class SinkResult(BaseModel):
    """Outcome of persisting confirmed rows. Failures are data, not exceptions."""
    success: bool
    stored_rows: int = Field(default=0, ge=0)
    error: str | None = None


# =============================================================================
# Canonical Target Schema
# =============================================================================

class StandardDataSchema(BaseModel):
    """
    Canonical record the dashboard reads.

    Imported rows only carry the fields their mappings produced; this model
    documents the full target vocabulary.
    """

    date: datetime
    store_id: str | None = None
    store_name: str | None = None
    channel: str
    ad_spend: float = 0.0
    revenue: float = 0.0
    orders: float = 0.0
    conversions: float = 0.0
    impressions: float | None = None
    clicks: float | None = None
    status: str | None = None
