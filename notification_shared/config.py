"""
Shared configuration management for the Notification Service.
"""

from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_snake
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


DEVELOPMENT_ENVIRONMENTS = ("local", "development")


def _snake_case_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_snake(key): _snake_case_keys(item) for key, item in value.items()}
    return value


class AppSettingsJsonSource(JsonConfigSettingsSource):
    """
    appsettings.json reader.

    Section and key names may be written either way: "JwtSettings": {"Issuer": ...}
    and "jwt_settings": {"issuer": ...} load the same values.
    """

    def __call__(self) -> Dict[str, Any]:
        return _snake_case_keys(super().__call__())


class JwtSettings(BaseModel):
    """Token issuer and audience expected on incoming bearer tokens."""

    issuer: Optional[str] = None
    audience: Optional[str] = None


class ParameterStoreSettings(BaseModel):
    """SSM parameter names holding the service secrets."""

    jwt_secret_key_path: Optional[str] = None
    db_connection_string_path: Optional[str] = None
    db_name_path: Optional[str] = None


class AwsSettings(BaseModel):
    """AWS client options."""

    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    profile: Optional[str] = None
    parameter_store: ParameterStoreSettings = Field(default_factory=ParameterStoreSettings)


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFICATION_",
        env_nested_delimiter="__",
        env_file=".env",
        json_file="appsettings.json",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # HTTP
    https_redirect: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # appsettings.json sits below the environment so deployments can override it
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            AppSettingsJsonSource(settings_cls),
            file_secret_settings,
        )

    @property
    def is_development(self) -> bool:
        return self.env.lower() in DEVELOPMENT_ENVIRONMENTS


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str = "notification"
    port: int = 8020
    host: str = "0.0.0.0"

    jwt_settings: JwtSettings = Field(default_factory=JwtSettings)
    aws: AwsSettings = Field(default_factory=AwsSettings)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
