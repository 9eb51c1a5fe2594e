# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for the import pipeline:
# - mapping.py: field types, detection results, mappings, import preview
#
# These models define the "contract" between the pipeline, the API and
# the import wizard client.
# =============================================================================

from .mapping import (
    ApiConfig,
    BusinessRuleReport,
    ConfidenceLevel,
    DataSource,
    DetectionConfig,
    FieldMapping,
    FieldType,
    ImportErrorRecord,
    ImportPreview,
    ImportStats,
    SchemaDetectionResult,
    SinkResult,
    StandardDataSchema,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    "ApiConfig",
    "BusinessRuleReport",
    "ConfidenceLevel",
    "DataSource",
    "DetectionConfig",
    "FieldMapping",
    "FieldType",
    "ImportErrorRecord",
    "ImportPreview",
    "ImportStats",
    "SchemaDetectionResult",
    "SinkResult",
    "StandardDataSchema",
]
