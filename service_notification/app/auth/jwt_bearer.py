"""
JWT bearer authentication for the Notification service.
"""

from typing import Any, Dict, List

import jwt
from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from notification_shared.errors import AuthenticationError
from notification_shared.logging import get_logger, set_user_context


class JwtValidationParameters(BaseModel):
    """Rules applied to every incoming bearer token."""

    model_config = ConfigDict(frozen=True)

    issuer: str
    audience: str
    signing_key: SecretStr
    algorithms: List[str] = Field(default_factory=lambda: ["HS256"])
    validate_issuer: bool = True
    validate_audience: bool = True
    validate_lifetime: bool = True
    validate_signing_key: bool = True
    leeway_seconds: int = 0

    @property
    def signing_key_bytes(self) -> bytes:
        return self.signing_key.get_secret_value().encode("utf-8")


class JwtBearerAuthenticator:
    """Validates HS256 bearer tokens against a symmetric signing key."""

    scheme = "Bearer"

    def __init__(self, parameters: JwtValidationParameters):
        self.parameters = parameters
        self.logger = get_logger("notification.auth")

    def decode(self, token: str) -> Dict[str, Any]:
        """Verify a token and return its claims."""
        params = self.parameters
        options = {
            "verify_signature": params.validate_signing_key,
            "verify_exp": params.validate_lifetime,
            "verify_iss": params.validate_issuer,
            "verify_aud": params.validate_audience,
            "require": ["exp"] if params.validate_lifetime else [],
        }

        try:
            return jwt.decode(
                token,
                params.signing_key_bytes,
                algorithms=params.algorithms,
                audience=params.audience if params.validate_audience else None,
                issuer=params.issuer if params.validate_issuer else None,
                leeway=params.leeway_seconds,
                options=options,
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise AuthenticationError("Invalid token", details={"token_error": str(e)})

    async def authenticate_request(self, request: Request) -> Dict[str, Any]:
        """Authenticate incoming request with its bearer token."""
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            raise AuthenticationError("Authorization header required")

        # Scheme names are case-insensitive (RFC 7235)
        scheme, _, token = auth_header.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != self.scheme.lower() or not token:
            raise AuthenticationError("Invalid authorization header format")

        try:
            claims = self.decode(token)
        except AuthenticationError as e:
            self.logger.warning("JWT authentication failed", error=e.message, **e.details)
            raise

        set_user_context(claims.get("sub"))
        request.state.claims = claims

        self.logger.info("Request authenticated with JWT", sub=claims.get("sub"))
        return claims
