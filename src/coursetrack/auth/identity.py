"""Identity gateway for the hosted auth service.

Turns a bearer credential into a canonical user by asking the identity
provider (Supabase-compatible ``/auth/v1/user`` endpoint) who it belongs to.
The provider is the only authority: this module never decodes tokens itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from coursetrack.config.app_config import IdentityConfig, load_app_config

logger = structlog.get_logger(__name__)

USER_ENDPOINT = "/auth/v1/user"


class UnauthorizedError(Exception):
    """Missing, malformed or rejected credential."""

    def __init__(self, message: str = "Unauthorized"):
        self.message = message
        super().__init__(message)


class IdentityProviderError(Exception):
    """The identity provider could not be reached or answered garbage."""

    pass


@dataclass
class AuthenticatedUser:
    """User as reported by the identity provider."""

    id: str
    email: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def first_name(self) -> str | None:
        return self.metadata.get("first_name")

    @property
    def last_name(self) -> str | None:
        return self.metadata.get("last_name")

    @property
    def full_name(self) -> str | None:
        return self.metadata.get("full_name") or self.metadata.get("name")


def parse_bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        UnauthorizedError: If the header is missing, not Bearer, or empty
    """
    if not authorization:
        raise UnauthorizedError("Unauthorized: No token provided")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Unauthorized: No token provided")

    return token.strip()


class IdentityGateway:
    """Verifies bearer tokens against the identity provider.

    Args:
        config: Identity settings. Defaults to the loaded app config.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(
        self,
        config: IdentityConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or load_app_config().identity
        self._transport = transport

    def _headers(self, token: str) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {token}"}
        if api_key := self.config.get_api_key():
            headers["apikey"] = api_key
        return headers

    async def verify(self, token: str) -> AuthenticatedUser:
        """Resolve a token to its user.

        Raises:
            UnauthorizedError: If the provider rejects the token
            IdentityProviderError: If the provider is unreachable or misconfigured
        """
        if not self.config.base_url:
            raise IdentityProviderError("Identity provider URL is not configured")

        url = self.config.base_url.rstrip("/") + USER_ENDPOINT
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.get(url, headers=self._headers(token))
        except httpx.HTTPError as e:
            logger.error("identity.request_failed", error=str(e))
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e

        if response.status_code in (401, 403):
            logger.info("identity.token_rejected", status=response.status_code)
            raise UnauthorizedError("Unauthorized: Invalid token")

        if response.status_code >= 400:
            logger.error("identity.provider_error", status=response.status_code)
            raise IdentityProviderError(
                f"Identity provider returned HTTP {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise IdentityProviderError("Identity provider returned invalid JSON") from e

        user_id = body.get("id") if isinstance(body, dict) else None
        if not user_id:
            raise UnauthorizedError("Unauthorized: Invalid token")

        return AuthenticatedUser(
            id=str(user_id),
            email=body.get("email"),
            metadata=dict(body.get("user_metadata") or {}),
        )
