# =============================================================================
# lib/field_types.py - Field Type Catalog
# =============================================================================
# One FieldTypeSpec per FieldType. Each spec bundles everything the pipeline
# needs to know about a semantic type:
#
#   - name patterns used by the detector (English + Italian vocabulary)
#   - canonical target field the column is mapped to ("" = do not map)
#   - converter applied to every value of a mapped column
#
# Adding a synonym or a locale means appending a pattern here.
#
# Usage:
#   from lib.field_types import get_field_type_spec
#   spec = get_field_type_spec(FieldType.AMOUNT)
#   spec.matches("fatturato")  # True
#   spec.transform("€12,50")   # 12.5
# =============================================================================

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable

from core.models import FieldType
from lib.transformers import (
    clean_text,
    identity,
    normalize_channel,
    parse_amount,
    parse_date,
    parse_number,
)

Transform = Callable[[Any], Any]


@dataclass(frozen=True)
class FieldTypeSpec:
    """Detection patterns, target field and converter for one FieldType."""

    field_type: FieldType
    target_field: str
    transform: Transform
    patterns: tuple[re.Pattern, ...] = field(default_factory=tuple)

    def matches(self, field_name: str) -> bool:
        """True if any pattern matches the column name."""
        return any(pattern.search(field_name) for pattern in self.patterns)


def _patterns(*sources: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


# =============================================================================
# Registry
# =============================================================================

FIELD_TYPE_SPECS: dict[FieldType, FieldTypeSpec] = {
    FieldType.DATE: FieldTypeSpec(
        field_type=FieldType.DATE,
        target_field="date",
        transform=parse_date,
        patterns=_patterns(
            r"^date$",
            r"^data$",
            r"^data[_-]?vendita$",
            r"^data[_-]?ordine$",
            r"^order[_-]?date$",
            r"^created[_-]?at$",
            r"^timestamp$",
            r"^giorno$",
        ),
    ),
    FieldType.AMOUNT: FieldTypeSpec(
        field_type=FieldType.AMOUNT,
        target_field="ad_spend",
        transform=parse_amount,
        patterns=_patterns(
            r"^importo$",
            r"^amount$",
            r"^spesa$",
            r"^spesa[_-]?pubblicitaria$",
            r"^fatturato$",
            r"^revenue$",
            r"^ad[_-]?spend$",
            r"^costo$",
            r"^cost$",
            r"^prezzo$",
            r"^price$",
            r"^valore$",
            r"^value$",
        ),
    ),
    FieldType.STORE: FieldTypeSpec(
        field_type=FieldType.STORE,
        target_field="store_name",
        transform=clean_text,
        patterns=_patterns(
            r"^negozio$",
            r"^store$",
            r"^punto[_-]?vendita$",
            r"^location$",
            r"^sede$",
            r"^shop$",
            r"^store[_-]?name$",
            r"^store[_-]?id$",
        ),
    ),
    FieldType.CHANNEL: FieldTypeSpec(
        field_type=FieldType.CHANNEL,
        target_field="channel",
        transform=normalize_channel,
        patterns=_patterns(
            r"^canale$",
            r"^channel$",
            r"^source$",
            r"^medium$",
            r"^campaign$",
            r"^utm[_-]?source$",
            r"^utm[_-]?medium$",
            r"^piattaforma$",
            r"^platform$",
        ),
    ),
    FieldType.STATUS: FieldTypeSpec(
        field_type=FieldType.STATUS,
        target_field="status",
        transform=clean_text,
        patterns=_patterns(
            r"^stato$",
            r"^status$",
            r"^state$",
            r"^condition$",
        ),
    ),
    FieldType.NUMBER: FieldTypeSpec(
        field_type=FieldType.NUMBER,
        target_field="orders",
        transform=parse_number,
        patterns=_patterns(
            r"^num",
            r"^count$",
            r"^quantity$",
            r"^quantita$",
            r"^orders$",
            r"^ordini$",
            r"^conversions$",
            r"^conversioni$",
            r"^clicks$",
            r"^impressions$",
            r"^views$",
        ),
    ),
    FieldType.TEXT: FieldTypeSpec(
        field_type=FieldType.TEXT,
        target_field="",
        transform=clean_text,
    ),
    FieldType.UNKNOWN: FieldTypeSpec(
        field_type=FieldType.UNKNOWN,
        target_field="",
        transform=identity,
    ),
}

_missing = [ft.value for ft in FieldType if ft not in FIELD_TYPE_SPECS]
if _missing:
    raise RuntimeError(f"No FieldTypeSpec registered for: {', '.join(_missing)}")

# Name patterns only, keyed by type (read-only view of the registry)
FIELD_PATTERNS: dict[FieldType, tuple[re.Pattern, ...]] = {
    field_type: spec.patterns for field_type, spec in FIELD_TYPE_SPECS.items()
}


def get_field_type_spec(field_type: FieldType | str) -> FieldTypeSpec:
    """Get the spec for a field type (enum member or its string value)."""
    return FIELD_TYPE_SPECS[FieldType(field_type)]


def get_suggested_mapping(field_type: FieldType | str) -> str:
    """Canonical target field for a type, "" when it should not be mapped."""
    return get_field_type_spec(field_type).target_field


def get_transform_function(field_type: FieldType | str) -> Transform:
    """Value converter for a type."""
    return get_field_type_spec(field_type).transform
