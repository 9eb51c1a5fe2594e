# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Provides common import datasets for testing
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_SERVICE_KEY", None)

import pytest

from core.models import DataSource


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def csv_source() -> DataSource:
    """A CSV upload as described by the wizard."""
    return DataSource(id="upload-1", name="vendite_gennaio.csv", type="csv")


@pytest.fixture
def italian_rows() -> list[dict]:
    """Single row with Italian column names."""
    return [
        {
            "data": "15/01/2024",
            "negozio": "Milano",
            "canale": "google",
            "spesa_pubblicitaria": "1500",
        }
    ]


@pytest.fixture
def marketing_rows() -> list[dict]:
    """A few rows in English, one of them missing a channel."""
    return [
        {"date": "2024-01-15", "store": "Milano Centro", "channel": "Google ", "ad_spend": "€1.500,00", "orders": "45"},
        {"date": "2024-01-16", "store": "Roma EUR", "channel": "Facebook", "ad_spend": "€1.200,50", "orders": "32"},
        {"date": "2024-01-17", "store": "Torino", "channel": "", "ad_spend": "€900", "orders": "12"},
    ]
