# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the import models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Models serialize to JSON properly
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import datetime

import pytest
from pydantic import ValidationError

from core.models import (
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
from lib.utils import confidence_level


# =============================================================================
# Configuration Tests
# =============================================================================

class TestDetectionConfig:
    """Tests for DetectionConfig."""

    def test_defaults(self):
        config = DetectionConfig()

        assert config.name_match_confidence == 0.8
        assert config.boost_ceiling == 0.9
        assert config.agreement_boost == 0.15
        assert config.max_confidence == 0.95
        assert config.value_fallback_factor == 0.6
        assert config.mapping_threshold == 0.5
        assert config.collision_policy == "last_applied"
        assert config.sample_rows == 10
        assert config.sample_values_kept == 3
        assert config.preview_rows == 10

    def test_frozen(self):
        config = DetectionConfig()
        with pytest.raises(ValidationError):
            config.mapping_threshold = 0.1

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            DetectionConfig(max_confidence=1.5)

    def test_unknown_collision_policy_rejected(self):
        with pytest.raises(ValidationError):
            DetectionConfig(collision_policy="first_wins")


# =============================================================================
# Source and Detection Tests
# =============================================================================

class TestDataSource:
    """Tests for DataSource."""

    def test_valid_source(self):
        source = DataSource(id="s1", name="Vendite", type="google_sheets")
        assert source.type == "google_sheets"
        assert source.api_config is None

    def test_invalid_type(self):
        with pytest.raises(ValidationError):
            DataSource(id="s1", name="x", type="excel")


class TestSchemaDetectionResult:
    """Tests for SchemaDetectionResult."""

    def test_defaults(self):
        result = SchemaDetectionResult(field_name="col")
        assert result.detected_type == FieldType.UNKNOWN
        assert result.confidence == 0.0
        assert result.sample_values == []
        assert result.suggested_mapping == ""

    @pytest.mark.parametrize("confidence", [-0.1, 1.01])
    def test_confidence_bounds(self, confidence):
        with pytest.raises(ValidationError):
            SchemaDetectionResult(field_name="col", confidence=confidence)

    def test_type_from_string(self):
        result = SchemaDetectionResult(field_name="col", detected_type="amount")
        assert result.detected_type is FieldType.AMOUNT


class TestFieldMapping:
    """Tests for FieldMapping."""

    def test_transform_not_serialized(self):
        mapping = FieldMapping(
            source_field="canale",
            target_field="channel",
            field_type=FieldType.CHANNEL,
            confidence=0.8,
            transform=str.lower,
        )
        dumped = mapping.model_dump(mode="json")

        assert "transform" not in dumped
        assert dumped["field_type"] == "channel"

    def test_parse_without_transform(self):
        mapping = FieldMapping.model_validate(
            {"source_field": "a", "target_field": "b", "field_type": "number", "confidence": 0.9}
        )
        assert mapping.transform is None


class TestImportErrorRecord:
    """Tests for ImportErrorRecord."""

    def test_negative_row_rejected(self):
        with pytest.raises(ValidationError):
            ImportErrorRecord(row=-1, field="data", error="bad")

    def test_value_can_be_anything(self):
        record = ImportErrorRecord(row=0, field="data", error="bad", value={"x": 1})
        assert record.value == {"x": 1}


# =============================================================================
# Preview Tests
# =============================================================================

class TestImportPreview:
    """Tests for ImportPreview."""

    def _preview(self, valid_rows: int = 1, error_count: int = 0) -> ImportPreview:
        return ImportPreview(
            source=DataSource(id="s1", name="file.csv", type="csv"),
            errors=[
                ImportErrorRecord(row=i, field="data", error="bad", value="x")
                for i in range(error_count)
            ],
            stats=ImportStats(total_rows=valid_rows + error_count, valid_rows=valid_rows,
                              invalid_rows=error_count),
        )

    def test_can_confirm(self):
        assert self._preview(valid_rows=1).can_confirm
        assert not self._preview(valid_rows=0).can_confirm

    def test_error_summary_short_list(self):
        shown, more = self._preview(error_count=3).error_summary()
        assert len(shown) == 3
        assert more == 0

    def test_error_summary_long_list(self):
        shown, more = self._preview(error_count=8).error_summary()
        assert [e.row for e in shown] == [0, 1, 2, 3, 4]
        assert more == 3

    def test_serializes_dates(self):
        preview = ImportPreview(
            source=DataSource(id="s1", name="file.csv", type="csv"),
            transformed_data=[{"date": datetime(2024, 1, 15)}],
        )
        dumped = preview.model_dump(mode="json")
        assert dumped["transformed_data"] == [{"date": "2024-01-15T00:00:00"}]


class TestResultModels:
    """Tests for BusinessRuleReport, SinkResult and StandardDataSchema."""

    def test_business_rule_report_defaults(self):
        report = BusinessRuleReport()
        assert report.valid
        assert report.warnings == []

    def test_sink_result(self):
        result = SinkResult(success=False, error="db down")
        assert result.stored_rows == 0
        assert result.error == "db down"

    def test_standard_schema_requires_date_and_channel(self):
        with pytest.raises(ValidationError):
            StandardDataSchema(store_name="Milano")

    def test_standard_schema_defaults(self):
        record = StandardDataSchema(date=datetime(2024, 1, 15), channel="google")
        assert record.ad_spend == 0.0
        assert record.clicks is None


class TestConfidenceLevel:
    """Tests for confidence_level()."""

    @pytest.mark.parametrize("score,level", [
        (0.95, ConfidenceLevel.HIGH),
        (0.8, ConfidenceLevel.HIGH),
        (0.79, ConfidenceLevel.MEDIUM),
        (0.5, ConfidenceLevel.MEDIUM),
        (0.49, ConfidenceLevel.LOW),
        (0.0, ConfidenceLevel.LOW),
    ])
    def test_buckets(self, score, level):
        assert confidence_level(score) is level
