"""
Startup wiring for the Notification service.

Startup is a straight line: validate the static configuration, resolve the
secrets it points at from the parameter store, then build the objects the
request handlers depend on. Any failure aborts startup; nothing is published
until every step has succeeded.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict

from notification_shared.config import ServiceConfig
from notification_shared.errors import MissingConfigurationError
from notification_shared.logging import get_logger
from notification_shared.parameter_store import ParameterStoreClient
from .auth.jwt_bearer import JwtBearerAuthenticator, JwtValidationParameters
from .db.mongo import MongoDatabaseProvider, MongoDBSettings


logger = get_logger("notification.bootstrap")


class StartupSettings(BaseModel):
    """The five values startup cannot proceed without."""

    model_config = ConfigDict(frozen=True)

    issuer: str
    audience: str
    jwt_secret_key_path: str
    db_connection_string_path: str
    db_name_path: str


@dataclass(frozen=True)
class ServiceContainer:
    """Everything downstream handlers resolve, built once at startup."""

    settings: StartupSettings
    authenticator: JwtBearerAuthenticator
    database: MongoDatabaseProvider


def read_startup_settings(config: ServiceConfig) -> StartupSettings:
    """
    Validate the required configuration.

    Raises:
        MissingConfigurationError: one or more values are absent or blank;
            every offending key is reported, not just the first.
    """
    jwt_settings = config.jwt_settings
    parameter_store = config.aws.parameter_store
    values: Dict[str, Optional[str]] = {
        "JwtSettings:Issuer": jwt_settings.issuer,
        "JwtSettings:Audience": jwt_settings.audience,
        "AWS:ParameterStore:JwtSecretKeyPath": parameter_store.jwt_secret_key_path,
        "AWS:ParameterStore:DbConnectionStringPath": parameter_store.db_connection_string_path,
        "AWS:ParameterStore:DbNamePath": parameter_store.db_name_path,
    }

    missing = [key for key, value in values.items() if value is None or not value.strip()]
    if missing:
        logger.error("Missing configuration", missing_keys=missing)
        raise MissingConfigurationError(missing)

    return StartupSettings(
        issuer=jwt_settings.issuer,
        audience=jwt_settings.audience,
        jwt_secret_key_path=parameter_store.jwt_secret_key_path,
        db_connection_string_path=parameter_store.db_connection_string_path,
        db_name_path=parameter_store.db_name_path,
    )


async def configure_jwt_authentication(parameter_store: ParameterStoreClient,
                                       settings: StartupSettings) -> JwtBearerAuthenticator:
    """Resolve the signing key and build the bearer token authenticator."""
    try:
        secret_key = await parameter_store.get_parameter(settings.jwt_secret_key_path, with_decryption=True)
    except Exception as e:
        logger.error("Error retrieving JWT secret key", parameter=settings.jwt_secret_key_path, error=str(e))
        raise

    return JwtBearerAuthenticator(
        JwtValidationParameters(
            issuer=settings.issuer,
            audience=settings.audience,
            signing_key=secret_key,
        )
    )


async def configure_database(parameter_store: ParameterStoreClient, settings: StartupSettings,
                             client_factory: Optional[Callable[[str], Any]] = None) -> MongoDatabaseProvider:
    """Resolve the connection string and database name and build the provider."""
    try:
        connection_string = await parameter_store.get_parameter(
            settings.db_connection_string_path, with_decryption=True
        )
        database_name = await parameter_store.get_parameter(settings.db_name_path, with_decryption=True)
    except Exception as e:
        logger.error("Error retrieving database connection string", error=str(e))
        raise

    return MongoDatabaseProvider(
        MongoDBSettings(connection_string=connection_string, database_name=database_name),
        client_factory=client_factory,
    )


async def bootstrap(config: ServiceConfig, parameter_store: ParameterStoreClient,
                    client_factory: Optional[Callable[[str], Any]] = None) -> ServiceContainer:
    """Run the full startup sequence and return the wired services."""
    settings = read_startup_settings(config)

    authenticator = await configure_jwt_authentication(parameter_store, settings)
    database = await configure_database(parameter_store, settings, client_factory)

    logger.info(
        "Startup configuration resolved",
        issuer=settings.issuer,
        audience=settings.audience,
        database=database.settings.database_name,
    )
    return ServiceContainer(settings=settings, authenticator=authenticator, database=database)
