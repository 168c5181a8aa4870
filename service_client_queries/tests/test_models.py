"""
Unit tests for client models and configuration.
"""

import json

import pytest
from pydantic import ValidationError

from shared.config import get_config
from service_client_queries.app.models import ClientRecord, ResponseBody


class TestClientRecord:
    """Test cases for ClientRecord conversions."""

    def test_from_row_maps_snake_case_columns(self):
        record = ClientRecord.from_row({
            "document": "12345",
            "document_type": "CC",
            "name": "John Doe",
            "phone": "1234567890",
            "email": "john@example.com",
            "address": "123 Main St",
            "credit_card": "1234-5678-9012-3456",
        })

        assert record.document_type == "CC"
        assert record.credit_card == "1234-5678-9012-3456"

    def test_cache_payload_uses_camel_case(self):
        record = ClientRecord(document="12345", document_type="CC", credit_card="4111")

        payload = json.loads(record.to_cache_payload())

        assert payload["documentType"] == "CC"
        assert payload["creditCard"] == "4111"
        assert "document_type" not in payload

    def test_accepts_alias_and_field_names(self):
        by_alias = ClientRecord.model_validate({"document": "1", "documentType": "CC"})
        by_name = ClientRecord(document="1", document_type="CC")

        assert by_alias == by_name

    def test_document_is_required(self):
        with pytest.raises(ValidationError):
            ClientRecord.from_cache_payload('{"name": "John Doe"}')

    def test_records_are_immutable(self):
        record = ClientRecord(document="12345")

        with pytest.raises(ValidationError):
            record.document = "54321"

    def test_response_envelope(self):
        envelope = ResponseBody.build(404, "The client was not found or does not exist")

        assert envelope.model_dump(by_alias=True) == {
            "header": {"responseCode": 404, "responseMessage": "The client was not found or does not exist"},
            "body": None
        }


class TestConfig:
    """Test cases for service configuration."""

    def test_defaults(self):
        config = get_config("client-queries", 8080)

        assert config.cache_name == "CLIENT-LIST"
        assert config.propagate_cache_read_errors is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CLIENTS_PROPAGATE_CACHE_READ_ERRORS", "true")
        monkeypatch.setenv("CLIENTS_REDIS_URL", "redis://cache:6379/1")

        config = get_config("client-queries", 8080)

        assert config.propagate_cache_read_errors is True
        assert config.redis_url == "redis://cache:6379/1"
