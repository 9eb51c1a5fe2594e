# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# Tests for the FastAPI app in app/main.py using TestClient.
# The row sink is replaced through app.dependency_overrides; nothing talks to
# a real database.
#
# Run with: pytest tests/test_api.py -v
# =============================================================================

import json

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.dependencies import get_row_sink
from app.main import app
from core.models import SinkResult
from lib.sinks import InMemoryRowSink

SOURCE = {"id": "upload-1", "name": "vendite_gennaio.csv", "type": "csv"}

CANONICAL_ROW = {
    "date": "2024-01-15T00:00:00",
    "store_name": "Milano",
    "channel": "google",
    "ad_spend": 1500.0,
}


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


class FailingSink:
    def store(self, rows, mappings, user_id, company_id):
        return SinkResult(success=False, error="db down")


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["persistence"] == "disabled"

    def test_liveness(self, client):
        response = client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/api/v1/health"


# =============================================================================
# Preview
# =============================================================================

class TestPreviewEndpoint:
    """Tests for POST /api/v1/imports/preview."""

    def test_italian_rows(self, client, italian_rows):
        response = client.post(
            "/api/v1/imports/preview",
            json={"source": SOURCE, "rows": italian_rows},
        )
        assert response.status_code == 200
        body = response.json()

        assert body["stats"] == {"total_rows": 1, "valid_rows": 1, "invalid_rows": 0}
        assert body["can_confirm"] is True
        assert body["transformed_data"] == [{
            "date": "2024-01-15T00:00:00",
            "store_name": "Milano",
            "channel": "google",
            "ad_spend": 1500.0,
        }]
        date_field = next(f for f in body["detected_fields"] if f["source_field"] == "data")
        assert date_field["confidence_level"] == "high"
        assert "transform" not in date_field

    def test_error_summary(self, client):
        rows = [{"data": "15/01/2024", "negozio": "Milano", "canale": "google"}] * 10
        rows = rows + [{"data": "boh", "negozio": "Milano", "canale": "google"}] * 7
        response = client.post("/api/v1/imports/preview", json={"source": SOURCE, "rows": rows})

        summary = response.json()["error_summary"]
        assert len(summary["errors"]) == 5
        assert summary["more"] == 2

    def test_empty_rows(self, client):
        response = client.post("/api/v1/imports/preview", json={"source": SOURCE, "rows": []})
        assert response.status_code == 200
        assert response.json()["can_confirm"] is False

    def test_invalid_source_type(self, client):
        source = dict(SOURCE, type="excel")
        response = client.post("/api/v1/imports/preview", json={"source": source, "rows": []})
        assert response.status_code == 422

    def test_too_many_rows(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_IMPORT_ROWS", 2)
        rows = [{"a": 1}] * 3
        response = client.post("/api/v1/imports/preview", json={"source": SOURCE, "rows": rows})

        assert response.status_code == 413
        assert response.json()["code"] == "TOO_MANY_ROWS"


# =============================================================================
# Validate / Export / Template
# =============================================================================

class TestValidateEndpoint:
    """Tests for POST /api/v1/imports/validate."""

    def test_clean_rows(self, client):
        response = client.post("/api/v1/imports/validate", json={"rows": [CANONICAL_ROW]})
        assert response.status_code == 200
        assert response.json() == {"valid": True, "warnings": []}

    def test_warnings(self, client):
        row = dict(CANONICAL_ROW, ad_spend=-5.0, date="2099-01-01T00:00:00")
        response = client.post("/api/v1/imports/validate", json={"rows": [row]})

        body = response.json()
        assert body["valid"] is False
        assert body["warnings"] == ["Row 1: negative ad spend", "Row 1: date is in the future"]


class TestExportEndpoint:
    """Tests for POST /api/v1/imports/export."""

    def test_csv(self, client):
        response = client.post("/api/v1/imports/export?format=csv", json={"rows": [CANONICAL_ROW]})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "import_export.csv" in response.headers["content-disposition"]
        assert response.text == (
            "date,store_name,channel,ad_spend\n"
            "2024-01-15T00:00:00,Milano,google,1500.0"
        )

    def test_json(self, client):
        response = client.post("/api/v1/imports/export?format=json", json={"rows": [CANONICAL_ROW]})

        assert response.status_code == 200
        assert json.loads(response.text) == [CANONICAL_ROW]

    def test_csv_is_default(self, client):
        response = client.post("/api/v1/imports/export", json={"rows": []})
        assert response.status_code == 200
        assert response.text == ""

    def test_excel_not_implemented(self, client):
        response = client.post("/api/v1/imports/export?format=excel", json={"rows": [CANONICAL_ROW]})

        assert response.status_code == 501
        body = response.json()
        assert body["code"] == "EXPORT_FORMAT_UNSUPPORTED"
        assert body["suggestion"] == "Use one of: csv, json"

    def test_unknown_format_rejected(self, client):
        response = client.post("/api/v1/imports/export?format=xml", json={"rows": []})
        assert response.status_code == 422


class TestTemplateEndpoint:
    """Tests for GET /api/v1/imports/template."""

    def test_download(self, client):
        response = client.get("/api/v1/imports/template")

        assert response.status_code == 200
        assert "template_importazione_dati.csv" in response.headers["content-disposition"]
        assert response.text.startswith("data,negozio,canale,spesa_pubblicitaria")


# =============================================================================
# Confirm
# =============================================================================

class TestConfirmEndpoint:
    """Tests for POST /api/v1/imports/confirm."""

    def _payload(self, rows=None):
        return {
            "rows": [CANONICAL_ROW] if rows is None else rows,
            "detected_fields": [{
                "source_field": "canale",
                "target_field": "channel",
                "field_type": "channel",
                "confidence": 0.8,
            }],
            "user_id": "user-1",
            "company_id": "company-1",
        }

    def test_stores_rows(self, client):
        sink = InMemoryRowSink()
        app.dependency_overrides[get_row_sink] = lambda: sink

        response = client.post("/api/v1/imports/confirm", json=self._payload())

        assert response.status_code == 200
        assert response.json() == {"success": True, "stored_rows": 1, "error": None}
        assert sink.rows[0]["date"] == "2024-01-15T00:00:00"
        assert sink.rows[0]["company_id"] == "company-1"

    def test_empty_rows(self, client):
        app.dependency_overrides[get_row_sink] = lambda: InMemoryRowSink()
        response = client.post("/api/v1/imports/confirm", json=self._payload(rows=[]))

        assert response.status_code == 400
        assert response.json()["code"] == "NOTHING_TO_IMPORT"

    def test_persistence_not_configured(self, client):
        response = client.post("/api/v1/imports/confirm", json=self._payload())

        assert response.status_code == 503
        assert response.json()["code"] == "PERSISTENCE_UNAVAILABLE"

    def test_sink_failure(self, client):
        app.dependency_overrides[get_row_sink] = lambda: FailingSink()
        response = client.post("/api/v1/imports/confirm", json=self._payload())

        assert response.status_code == 502
        body = response.json()
        assert body["code"] == "IMPORT_STORE_ERROR"
        assert body["details"] == {"error": "db down"}
