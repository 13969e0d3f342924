"""
Notification service entrypoint.
"""

from typing import Any, Callable, Optional

from notification_shared.base_service import BaseService
from notification_shared.config import ServiceConfig, get_config
from notification_shared.errors import DatabaseError
from notification_shared.parameter_store import ParameterStoreClient
from .bootstrap import ServiceContainer, bootstrap, read_startup_settings


SERVICE_NAME = "notification"
SERVICE_PORT = 8020


class NotificationService(BaseService):
    """Notification service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None,
                 parameter_store: Optional[ParameterStoreClient] = None,
                 client_factory: Optional[Callable[[str], Any]] = None):
        super().__init__(SERVICE_NAME, SERVICE_PORT, config or get_config(SERVICE_NAME, SERVICE_PORT))
        self.parameter_store = parameter_store
        self.client_factory = client_factory
        self.container: Optional[ServiceContainer] = None

        self._setup_notification_routes()

    def _setup_notification_routes(self):
        """Set up notification-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "Notification Service",
                "version": "1.0.0"
            }

    async def startup(self):
        """Resolve secrets and wire services; any failure aborts startup."""
        try:
            # Configuration errors win over anything AWS-related
            read_startup_settings(self.config)

            if self.parameter_store is None:
                aws = self.config.aws
                self.parameter_store = ParameterStoreClient.from_settings(
                    region=aws.region,
                    endpoint_url=aws.endpoint_url,
                    profile=aws.profile,
                    metrics=self.metrics,
                )

            container = await bootstrap(self.config, self.parameter_store, self.client_factory)
        except Exception as e:
            self.logger.error("Startup failed", error=str(e))
            self.metrics.record_error("STARTUP_FAILURE")
            raise

        self.container = container
        self.app.state.container = container
        self.logger.info("Notification service started", env=self.config.env)

    async def shutdown(self):
        if self.container is not None:
            await self.container.database.close()

    async def _check_dependencies(self):
        """Check notification dependencies."""
        dependencies = {}

        if self.container is None:
            dependencies["mongodb"] = "unavailable"
            return dependencies

        try:
            await self.container.database.ping()
            dependencies["mongodb"] = "ok"
        except DatabaseError:
            dependencies["mongodb"] = "error"

        return dependencies


def create_app(config: Optional[ServiceConfig] = None,
               parameter_store: Optional[ParameterStoreClient] = None,
               client_factory: Optional[Callable[[str], Any]] = None):
    """Create FastAPI application."""
    service = NotificationService(config, parameter_store, client_factory)
    return service.app


if __name__ == "__main__":
    service = NotificationService()
    service.run()
