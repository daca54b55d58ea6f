"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header
from fastapi.concurrency import run_in_threadpool

from coursetrack.auth.identity import AuthenticatedUser, IdentityGateway, parse_bearer_token
from coursetrack.db import users_repository


@lru_cache(maxsize=1)
def get_identity_gateway() -> IdentityGateway:
    """Process-wide identity gateway."""
    return IdentityGateway()


async def get_current_user(
    authorization: str | None = Header(default=None),
    gateway: IdentityGateway = Depends(get_identity_gateway),
) -> AuthenticatedUser:
    """Authenticate the request and make sure the user row exists.

    Raises UnauthorizedError, which the app maps to 401.
    """
    token = parse_bearer_token(authorization)
    user = await gateway.verify(token)
    await run_in_threadpool(
        users_repository.ensure_user,
        user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
    )
    return user
