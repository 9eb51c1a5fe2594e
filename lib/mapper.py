# =============================================================================
# lib/mapper.py - Mapping, Transformation and Import Preview
# =============================================================================
# Turns detection results into concrete field mappings and runs them over
# every raw row:
#
#   analyze_data_schema -> create_field_mappings -> transform_data
#                       -> validate_data -> ImportPreview
#
# Per-cell problems are collected as ImportErrorRecord entries and returned
# with the data. Nothing in this module raises for bad input values, so one
# bad cell never aborts an import.
# =============================================================================

import logging
from datetime import datetime
from typing import Any

from core.models import (
    DataSource,
    DetectionConfig,
    FieldMapping,
    ImportErrorRecord,
    ImportPreview,
    ImportStats,
    SchemaDetectionResult,
)
from lib.detector import DEFAULT_CONFIG, analyze_data_schema
from lib.field_types import get_transform_function

# Set up logging for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Mapping Builder
# =============================================================================

def create_field_mappings(
    detection_results: list[SchemaDetectionResult],
    config: DetectionConfig = DEFAULT_CONFIG,
) -> list[FieldMapping]:
    """
    Create mappings for confidently detected columns.

    A column is mapped only when its confidence is strictly above
    `config.mapping_threshold` and its type has a target field. Input order
    is kept, so mappings stay sorted by confidence.
    """
    mappings = []

    for result in detection_results:
        if result.confidence > config.mapping_threshold and result.suggested_mapping:
            mappings.append(FieldMapping(
                source_field=result.field_name,
                target_field=result.suggested_mapping,
                field_type=result.detected_type,
                confidence=result.confidence,
                transform=get_transform_function(result.detected_type),
            ))

    return mappings


def _application_order(
    mappings: list[FieldMapping],
    config: DetectionConfig,
) -> list[FieldMapping]:
    """
    Order in which mappings are written into a row.

    With "last_applied" the list order is used as-is: when two mappings share
    a target field the later (less confident) one overwrites the earlier.
    With "highest_confidence" the least confident mapping is applied first.
    """
    if config.collision_policy == "highest_confidence":
        return sorted(mappings, key=lambda m: m.confidence)
    return list(mappings)


# =============================================================================
# Row Transformer
# =============================================================================

def transform_data(
    raw_data: list[dict[str, Any]],
    mappings: list[FieldMapping],
    config: DetectionConfig = DEFAULT_CONFIG,
) -> tuple[list[dict[str, Any]], list[ImportErrorRecord]]:
    """
    Apply mappings to every raw row.

    Unmapped columns are dropped. A converter that raises, or that returns
    None for a non-null value, produces an ImportErrorRecord and the row
    carries on with its other fields.

    Returns:
        Tuple of (transformed rows, errors)
    """
    transformed: list[dict[str, Any]] = []
    errors: list[ImportErrorRecord] = []
    ordered = _application_order(mappings, config)

    for row_index, row in enumerate(raw_data):
        transformed_row: dict[str, Any] = {}

        for mapping in ordered:
            source_value = row.get(mapping.source_field)
            try:
                if mapping.transform is not None:
                    transformed_value = mapping.transform(source_value)
                else:
                    transformed_value = source_value
            except Exception as e:
                errors.append(ImportErrorRecord(
                    row=row_index,
                    field=mapping.source_field,
                    error=str(e) or "Transformation error",
                    value=source_value,
                ))
                continue

            transformed_row[mapping.target_field] = transformed_value

            if transformed_value is None and source_value is not None:
                errors.append(ImportErrorRecord(
                    row=row_index,
                    field=mapping.source_field,
                    error=f"Failed to transform value to {mapping.field_type.value}",
                    value=source_value,
                ))

        transformed.append(transformed_row)

    if errors:
        logger.debug(f"Transformation produced {len(errors)} errors over {len(raw_data)} rows")

    return transformed, errors


# =============================================================================
# Row Validator
# =============================================================================

def is_valid_row(row: dict[str, Any]) -> bool:
    """
    Check the mandatory canonical fields.

    A row needs a real date, a store (name or id) and a channel.
    """
    has_date = isinstance(row.get("date"), datetime)
    has_store = bool(row.get("store_name") or row.get("store_id"))
    has_channel = bool(row.get("channel"))
    return has_date and has_store and has_channel


def validate_data(
    data: list[dict[str, Any]],
) -> tuple[list[dict[str, Any]], list[int]]:
    """
    Split transformed rows into valid rows and invalid row indices.

    Both partitions keep input order.
    """
    valid: list[dict[str, Any]] = []
    invalid: list[int] = []

    for index, row in enumerate(data):
        if is_valid_row(row):
            valid.append(row)
        else:
            invalid.append(index)

    return valid, invalid


# =============================================================================
# Preview Builder
# =============================================================================

def create_import_preview(
    source: DataSource,
    raw_data: list[dict[str, Any]],
    config: DetectionConfig = DEFAULT_CONFIG,
) -> ImportPreview:
    """
    Run the full pipeline and build the preview shown before import.

    raw_data and transformed_data are cut to `config.preview_rows` (the
    transformed sample holds the first VALID rows). Stats and errors cover
    the whole dataset.

    Example:
        preview = create_import_preview(
            DataSource(id="1", name="vendite.csv", type="csv"),
            [{"data": "15/01/2024", "negozio": "Milano", "canale": "google"}],
        )
        preview.stats.valid_rows  # 1
    """
    detection_results = analyze_data_schema(raw_data, config)
    detected_fields = create_field_mappings(detection_results, config)
    transformed, errors = transform_data(raw_data, detected_fields, config)
    valid, invalid = validate_data(transformed)

    stats = ImportStats(
        total_rows=len(raw_data),
        valid_rows=len(valid),
        invalid_rows=len(invalid),
    )

    logger.info(
        f"Import preview for '{source.name}': {stats.total_rows} rows, "
        f"{stats.valid_rows} valid, {stats.invalid_rows} invalid, "
        f"{len(detected_fields)} mapped fields, {len(errors)} errors"
    )

    return ImportPreview(
        source=source,
        raw_data=[dict(row) for row in raw_data[:config.preview_rows]],
        detected_fields=detected_fields,
        transformed_data=valid[:config.preview_rows],
        errors=errors,
        stats=stats,
    )
