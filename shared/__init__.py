"""
Shared utilities for the Game Platform Gateway.

This package aggregates common building blocks consumed by the service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and response envelopes
- base_service: FastAPI application shell

Do not import from service_* packages into shared/.
"""
