"""
Notification Service application package.

This package exposes the FastAPI application and the startup wiring that
resolves its secrets before it serves traffic:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.bootstrap: Configuration validation, secret resolution, service wiring.
- app.auth: JWT bearer validation built from the resolved signing key.
- app.db: MongoDB client and database provider.
- app.dependencies: FastAPI dependencies for downstream handlers.
"""
