# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Smart Import API:
# - test_models.py: Pydantic model validation
# - test_field_types.py: Field type catalog
# - test_transformers.py: Value converters
# - test_detector.py: Field type detection and schema analysis
# - test_mapper.py: Mappings, transformation, validation, preview
# - test_exporter.py: CSV / JSON export
# - test_business_rules.py: Plausibility warnings
# - test_sinks.py: Row sinks, templates and the Supabase wrapper
# - test_api.py: HTTP endpoints
#
# Run tests with: pytest
# =============================================================================
