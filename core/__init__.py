# =============================================================================
# core/ - Shared Schemas Package
# =============================================================================
# This package holds the framework-agnostic data model of the import engine:
# - models/: Pydantic schemas for field types, mappings, previews and the
#   detection configuration
#
# Code in this package should NOT import from FastAPI or lib/.
# Every other layer depends on it, never the other way round.
# =============================================================================
