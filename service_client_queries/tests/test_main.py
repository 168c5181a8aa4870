"""
Unit tests for the Client Queries main service.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from shared.errors import CacheError, DurableStoreError
from shared.logging import CORRELATION_ID_HEADER, get_correlation_id
from service_client_queries.app.main import ClientQueriesService, create_app
from service_client_queries.app.models import ClientRecord


@pytest.fixture
def service():
    """Create ClientQueriesService instance."""
    return ClientQueriesService()


@pytest.fixture
def client(service):
    """Create test client (lifespan not started)."""
    return TestClient(service.app)


@pytest.fixture
def record():
    return ClientRecord(
        document="12345",
        document_type="CC",
        name="John Doe",
        phone="1234567890",
        email="john@example.com",
        address="123 Main St",
        credit_card="1234-5678-9012-3456"
    )


class TestClientQueriesService:
    """Test cases for ClientQueriesService."""

    def test_create_app(self):
        app = create_app()
        assert app.title == "Client Queries Service"

    def test_root_endpoint(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "client-queries"
        assert "read_through_cache" in data["capabilities"]

    def test_get_client_found(self, service, client, record):
        with patch.object(service.lookup, "lookup", new_callable=AsyncMock, return_value=record) as lookup:
            response = client.get("/api/v1/clients/12345")

        assert response.status_code == 200
        assert response.json() == {
            "header": {"responseCode": 200, "responseMessage": "Client retrieved successfully"},
            "body": {
                "document": "12345",
                "documentType": "CC",
                "name": "John Doe",
                "phone": "1234567890",
                "email": "john@example.com",
                "address": "123 Main St",
                "creditCard": "1234-5678-9012-3456"
            }
        }
        lookup.assert_awaited_once_with("12345")

    def test_get_client_not_found(self, service, client):
        with patch.object(service.lookup, "lookup", new_callable=AsyncMock, return_value=None):
            response = client.get("/api/v1/clients/99999")

        assert response.status_code == 404
        data = response.json()
        assert data["header"] == {
            "responseCode": 404,
            "responseMessage": "The client was not found or does not exist"
        }
        assert data["body"] is None

    def test_get_client_blank_document(self, service, client):
        with patch.object(service.lookup, "lookup", new_callable=AsyncMock) as lookup:
            response = client.get("/api/v1/clients/%20%20")

        assert response.status_code == 400
        assert response.json()["header"]["responseMessage"] == "Document must not be blank"
        lookup.assert_not_called()

    def test_get_client_empty_document(self, service, client):
        with patch.object(service.lookup, "lookup", new_callable=AsyncMock) as lookup:
            response = client.get("/api/v1/clients/")

        assert response.status_code == 400
        assert response.json() == {
            "header": {"responseCode": 400, "responseMessage": "Document must not be blank"},
            "body": None
        }
        lookup.assert_not_called()

    def test_get_client_cache_failure_when_propagating(self, monkeypatch):
        monkeypatch.setenv("CLIENTS_PROPAGATE_CACHE_READ_ERRORS", "true")
        service = ClientQueriesService()
        client = TestClient(service.app)

        # Cache never started, so the read fails
        response = client.get("/api/v1/clients/12345")

        assert service.lookup.propagate_cache_read_errors is True
        assert response.status_code == 503
        data = response.json()
        assert data["code"] == "CACHE_ERROR"
        assert data["message"] == "Redis cache not started"

    def test_get_client_store_failure(self, service, client):
        error = DurableStoreError("Failed to query client store", {"document": "12345"})
        with patch.object(service.lookup, "lookup", new_callable=AsyncMock, side_effect=error):
            response = client.get("/api/v1/clients/12345")

        assert response.status_code == 503
        data = response.json()
        assert data["code"] == "DURABLE_STORE_ERROR"
        assert data["details"] == {"document": "12345"}

    def test_correlation_id_is_echoed(self, service, client, record):
        seen = []

        async def capture(document):
            seen.append(get_correlation_id())
            return record

        with patch.object(service.lookup, "lookup", new_callable=AsyncMock, side_effect=capture):
            response = client.get("/api/v1/clients/12345", headers={CORRELATION_ID_HEADER: "corr-abc"})

        assert response.headers[CORRELATION_ID_HEADER] == "corr-abc"
        assert seen == ["corr-abc"]

    def test_correlation_id_is_generated(self, client):
        response = client.get("/")

        assert len(response.headers[CORRELATION_ID_HEADER]) == 36

    def test_health_reports_dependencies(self, service, client):
        with patch.object(service.cache, "health_check", new_callable=AsyncMock, return_value=True), \
                patch.object(service.store, "health_check", new_callable=AsyncMock, return_value=True):
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["dependencies"] == {"redis": "ok", "postgres": "ok"}

    def test_health_degraded_when_not_started(self, client):
        response = client.get("/health")

        data = response.json()
        assert data["status"] == "degraded"
        assert data["dependencies"] == {"redis": "error", "postgres": "error"}

    def test_metrics_endpoint(self, client):
        client.get("/")
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text

    def test_lifespan_tolerates_cache_outage(self, service):
        with patch.object(service.store, "start", new_callable=AsyncMock) as store_start, \
                patch.object(service.store, "stop", new_callable=AsyncMock) as store_stop, \
                patch.object(service.cache, "start", new_callable=AsyncMock,
                             side_effect=CacheError("Failed to start Redis cache")), \
                patch.object(service.cache, "stop", new_callable=AsyncMock) as cache_stop:
            with TestClient(service.app) as client:
                assert client.get("/").status_code == 200
                assert service.lookup._loop is not None

        store_start.assert_awaited_once()
        cache_stop.assert_awaited_once()
        store_stop.assert_awaited_once()

    def test_service_initialization(self, service):
        assert service.service_name == "client-queries"
        assert service.port == 8080
        assert service.lookup.cache is service.cache
        assert service.lookup.store is service.store
        assert service.lookup.propagate_cache_read_errors is False
