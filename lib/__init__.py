# =============================================================================
# lib/ - Import Pipeline Modules
# =============================================================================
# This package contains the schema detection and transformation engine:
# - field_types.py: Field type catalog (name patterns, targets, converters)
# - transformers.py: Value converters (dates, amounts, numbers, text)
# - detector.py: Column type detection and schema analysis
# - mapper.py: Mappings, row transformation, validation, import preview
# - exporter.py: CSV / JSON export of canonical rows
# - business_rules.py: Plausibility warnings on canonical rows
# - sinks.py: Persistence and template boundaries
# - supabase_client.py: Typed Supabase wrapper used by the row sink
# - utils.py: Shared utilities (error base class, confidence buckets)
#
# The pipeline modules are pure and can be tested in isolation.
# =============================================================================

from lib.detector import analyze_data_schema, detect_field_type, detect_type_from_values
from lib.exporter import UnsupportedExportFormatError, export_data
from lib.mapper import (
    create_field_mappings,
    create_import_preview,
    transform_data,
    validate_data,
)
from lib.transformers import parse_amount, parse_date
from lib.utils import ApplicationError, confidence_level

__all__ = [
    # Detection
    "analyze_data_schema",
    "detect_field_type",
    "detect_type_from_values",
    # Mapping
    "create_field_mappings",
    "create_import_preview",
    "transform_data",
    "validate_data",
    # Converters
    "parse_amount",
    "parse_date",
    # Export
    "export_data",
    "UnsupportedExportFormatError",
    # Utils
    "ApplicationError",
    "confidence_level",
]
