"""Authentication against the hosted identity provider."""

from coursetrack.auth.identity import (
    AuthenticatedUser,
    IdentityGateway,
    IdentityProviderError,
    UnauthorizedError,
    parse_bearer_token,
)

__all__ = [
    "AuthenticatedUser",
    "IdentityGateway",
    "IdentityProviderError",
    "UnauthorizedError",
    "parse_bearer_token",
]
