"""
AWS SSM Parameter Store access for the Notification Service.
"""

import asyncio
import time
from typing import Any, Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from notification_shared.errors import SecretFetchError
from notification_shared.logging import get_logger
from notification_shared.metrics import MetricsCollector


class ParameterStoreClient:
    """
    Resolves parameter names into values from AWS SSM Parameter Store.

    The boto3 client is built on the first lookup, so an unusable AWS
    setup (no region, unknown profile) surfaces as a SecretFetchError for
    that parameter rather than while the service is being constructed.
    """

    def __init__(self, ssm_client: Any = None, metrics: Optional[MetricsCollector] = None,
                 client_factory: Optional[Callable[[], Any]] = None):
        """
        Initialize the client.

        Args:
            ssm_client: boto3 SSM client
            metrics: Optional collector recording lookup outcomes
            client_factory: Builds the SSM client when none is given
        """
        if ssm_client is None and client_factory is None:
            raise ValueError("ssm_client or client_factory is required")
        self._ssm = ssm_client
        self._client_factory = client_factory
        self.metrics = metrics
        self.logger = get_logger("notification.parameter_store")

    @classmethod
    def from_settings(cls, region: Optional[str] = None, endpoint_url: Optional[str] = None,
                      profile: Optional[str] = None,
                      metrics: Optional[MetricsCollector] = None) -> "ParameterStoreClient":
        """
        Build a client from AWS settings.

        Unset values fall back to the standard boto3 resolution chain
        (environment, shared config, instance metadata).
        """
        def create_ssm_client():
            session = boto3.session.Session(profile_name=profile, region_name=region)
            return session.client("ssm", endpoint_url=endpoint_url)

        return cls(client_factory=create_ssm_client, metrics=metrics)

    @property
    def ssm(self) -> Any:
        """The SSM client, created on first use."""
        if self._ssm is None:
            self._ssm = self._client_factory()
        return self._ssm

    async def get_parameter(self, name: str, with_decryption: bool = True) -> str:
        """
        Fetch a single parameter value.

        Args:
            name: Parameter name (path)
            with_decryption: Decrypt SecureString values

        Returns:
            Parameter value

        Raises:
            SecretFetchError: lookup failed or returned no value
        """
        start_time = time.time()
        try:
            value = await asyncio.to_thread(self._fetch, name, with_decryption)
        except SecretFetchError:
            self._record("error", start_time)
            raise
        except ClientError as e:
            self._record("error", start_time)
            code = e.response.get("Error", {}).get("Code", "Unknown")
            self.logger.error("Parameter lookup failed", parameter=name, error_code=code)
            raise SecretFetchError(name, details={"error_code": code}) from e
        except BotoCoreError as e:
            self._record("error", start_time)
            self.logger.error("Parameter lookup failed", parameter=name, error=str(e))
            raise SecretFetchError(name, details={"error": str(e)}) from e

        self._record("success", start_time)
        self.logger.info("Parameter resolved", parameter=name, decrypted=with_decryption)
        return value

    def _fetch(self, name: str, with_decryption: bool) -> str:
        response = self.ssm.get_parameter(Name=name, WithDecryption=with_decryption)
        value = response.get("Parameter", {}).get("Value")
        if not value:
            raise SecretFetchError(name, "Parameter has no value")
        return value

    def _record(self, status: str, start_time: float) -> None:
        if self.metrics is not None:
            self.metrics.record_parameter_fetch(status, time.time() - start_time)
