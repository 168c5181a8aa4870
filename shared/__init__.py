"""
Shared utilities for the Client Queries service.

This package aggregates common building blocks consumed by service packages:

- config: Service configuration via pydantic-settings
- logging: Structured logging with correlation IDs
- metrics: Prometheus metrics helpers
- tracing: OpenTelemetry tracing config
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton with health and metrics routes

Do not import from service_* packages into shared/.
"""
