"""
Shared utilities for the Notification Service.

This package aggregates the common building blocks used by the service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- parameter_store: AWS SSM Parameter Store client
- base_service: FastAPI application scaffolding

Do not import from service_* packages into notification_shared/.
"""
