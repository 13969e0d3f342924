"""
MongoDB access for the Notification service.
"""

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, SecretStr
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from notification_shared.errors import DatabaseError
from notification_shared.logging import get_logger


class MongoDBSettings(BaseModel):
    """Connection settings resolved at startup; read-only afterwards."""

    model_config = ConfigDict(frozen=True)

    connection_string: SecretStr
    database_name: str


class MongoDatabaseProvider:
    """Owns the process-wide client and hands out the configured database."""

    def __init__(self, settings: MongoDBSettings,
                 client_factory: Optional[Callable[[str], Any]] = None):
        self.settings = settings
        self._client_factory = client_factory or AsyncMongoClient
        self._client: Optional[Any] = None
        self.logger = get_logger("notification.mongo")

    @property
    def client(self) -> Any:
        """The shared client, created on first use."""
        if self._client is None:
            self._client = self._client_factory(self.settings.connection_string.get_secret_value())
            self.logger.info("MongoDB client created", database=self.settings.database_name)
        return self._client

    def get_database(self) -> Any:
        return self.client.get_database(self.settings.database_name)

    async def ping(self) -> None:
        try:
            await self.get_database().command("ping")
        except PyMongoError as e:
            raise DatabaseError("MongoDB ping failed", details={"error": str(e)}) from e

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.close()
        self._client = None
        self.logger.info("MongoDB client closed")
