# =============================================================================
# lib/detector.py - Field Type Detection
# =============================================================================
# Infers what each column of an uploaded dataset means, from two signals:
#
#   1. The column NAME, matched against the field type catalog
#      (lib/field_types.py). A match is binary and is the stronger signal.
#   2. The column VALUES (first rows only), classified as date, amount,
#      number or text. Used to rescue unnamed columns and to corroborate
#      a name match.
#
# Confidence is a heuristic score, not a probability. It drives the mapping
# threshold and the traffic-light display in the import wizard.
# =============================================================================

import logging
from typing import Any

from core.models import DetectionConfig, FieldType, SchemaDetectionResult
from lib.field_types import FIELD_TYPE_SPECS, get_suggested_mapping
from lib.transformers import has_currency_symbol, is_valid_date, leading_float, strip_currency
from lib.utils import is_blank

# Set up logging for this module
logger = logging.getLogger(__name__)

DEFAULT_CONFIG = DetectionConfig()


# =============================================================================
# Value-based Classification
# =============================================================================

def _is_numeric(value: Any) -> bool:
    """Numeric once currency symbols and whitespace are ignored."""
    if isinstance(value, str):
        value = strip_currency(value)
    return leading_float(value) is not None


def detect_type_from_values(
    values: list[Any],
    config: DetectionConfig = DEFAULT_CONFIG,
) -> tuple[FieldType, float] | None:
    """
    Classify a column from its sample values.

    Checks, in order:
    - dates: more than 70% parse as dates -> DATE
    - numbers: more than 80% are numeric -> AMOUNT if any value carries a
      currency symbol, NUMBER otherwise
    - anything else -> TEXT

    Returns:
        (FieldType, confidence), or None when every value is null or empty
    """
    non_null = [v for v in values if not is_blank(v)]
    if not non_null:
        return None

    total = len(non_null)

    date_count = sum(1 for v in non_null if is_valid_date(v))
    if date_count / total > config.date_ratio_threshold:
        return FieldType.DATE, config.date_value_confidence

    number_count = sum(1 for v in non_null if _is_numeric(v))
    if number_count / total > config.numeric_ratio_threshold:
        if any(has_currency_symbol(v) for v in non_null):
            return FieldType.AMOUNT, config.amount_value_confidence
        return FieldType.NUMBER, config.number_value_confidence

    return FieldType.TEXT, config.text_value_confidence


# =============================================================================
# Field Detection
# =============================================================================

def detect_type_from_name(
    field_name: str,
    config: DetectionConfig = DEFAULT_CONFIG,
) -> tuple[FieldType, float]:
    """
    Match a column name against every type's patterns.

    All matches score the same, so on a tie the first type in FieldType
    declaration order wins.
    """
    best_match = FieldType.UNKNOWN
    highest_confidence = 0.0

    for field_type, spec in FIELD_TYPE_SPECS.items():
        if spec.matches(field_name):
            confidence = config.name_match_confidence
            if confidence > highest_confidence:
                best_match = field_type
                highest_confidence = confidence

    return best_match, highest_confidence


def detect_field_type(
    field_name: str,
    sample_values: list[Any],
    config: DetectionConfig = DEFAULT_CONFIG,
) -> SchemaDetectionResult:
    """
    Detect the semantic type of one column.

    Fusion of the two signals:
    - no name match: take the value type at a discounted confidence
    - name and values agree: boost the name confidence
    - they disagree: the name wins

    Example:
        result = detect_field_type("importo", ["€100", "€200", "€50"])
        result.detected_type  # FieldType.AMOUNT
        result.confidence     # 0.95
    """
    best_match, confidence = detect_type_from_name(field_name, config)

    if sample_values:
        value_based = detect_type_from_values(sample_values, config)
        if value_based is not None:
            value_type, value_confidence = value_based
            if best_match == FieldType.UNKNOWN:
                best_match = value_type
                confidence = value_confidence * config.value_fallback_factor
            elif confidence < config.boost_ceiling and value_type == best_match:
                confidence = min(config.max_confidence, confidence + config.agreement_boost)

    confidence = max(0.0, min(confidence, config.max_confidence))

    return SchemaDetectionResult(
        field_name=field_name,
        detected_type=best_match,
        confidence=confidence,
        sample_values=list(sample_values[:config.sample_values_kept]),
        suggested_mapping=get_suggested_mapping(best_match),
    )


# =============================================================================
# Schema Analysis
# =============================================================================

def analyze_data_schema(
    raw_data: list[dict[str, Any]],
    config: DetectionConfig = DEFAULT_CONFIG,
) -> list[SchemaDetectionResult]:
    """
    Run detection over every column of a dataset.

    Columns come from the first row. Each column is sampled from the first
    `config.sample_rows` rows, skipping nulls.

    Returns:
        One result per column, most confident first (stable for ties)
    """
    if not raw_data:
        return []

    head = raw_data[:config.sample_rows]
    results = []

    for field_name in raw_data[0].keys():
        sample_values = [
            row.get(field_name) for row in head
            if row.get(field_name) is not None
        ]
        results.append(detect_field_type(field_name, sample_values, config))

    results.sort(key=lambda r: r.confidence, reverse=True)

    logger.debug(
        "Detected schema: "
        + ", ".join(f"{r.field_name}={r.detected_type.value}({r.confidence:.2f})" for r in results)
    )
    return results
