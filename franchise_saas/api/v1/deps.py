"""
FastAPI dependencies — database session, services and auth guards.

Request flow: the bearer token is pulled from the ``Authorization`` header,
validated by the ``TokenService`` on ``app.state``, and the resulting
``Identity`` is bound to ``request.state.identity`` before any role or
permission check runs.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from franchise_saas.core.exceptions import AuthenticationError, AuthorizationError
from franchise_saas.core.permissions import Permission, Role, has_permission
from franchise_saas.core.security import TokenService
from franchise_saas.schemas.token import Identity
from franchise_saas.services.checklist_store import ChecklistStore
from franchise_saas.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


# ── Database session & services ─────────────────────────────────────
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)


def get_checklist_store(db: AsyncSession = Depends(get_db)) -> ChecklistStore:
    return ChecklistStore(db)


# ── Auth dependencies ───────────────────────────────────────────────
def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from a literal ``Bearer <token>`` header value."""
    if not authorization:
        raise AuthenticationError(
            "Authorization header is missing", error="Authorization header required"
        )
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token or token != token.strip() or " " in token:
        raise AuthenticationError(
            "Authorization header must be in the format 'Bearer <token>'",
            error="Invalid authorization header format",
        )
    return token


async def get_current_identity(
    request: Request,
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    token = extract_bearer_token(authorization)
    try:
        claims = tokens.validate(token)
    except AuthenticationError as exc:
        logger.warning("Rejected bearer token on %s: %s", request.url.path, exc.message)
        raise

    identity = Identity.from_claims(claims)
    request.state.identity = identity
    return identity


def require_role(role: Role) -> Callable[..., Awaitable[Identity]]:
    """Only allow callers whose role is exactly ``role``."""

    async def _guard(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role != role:
            logger.warning(
                "User %s (%s) denied: requires role %s",
                identity.user_id,
                identity.role.value,
                role.value,
            )
            raise AuthorizationError(f"User does not have the required role: {role.value}")
        return identity

    return _guard


def require_permission(permission: Permission) -> Callable[..., Awaitable[Identity]]:
    """Only allow callers whose role is on the permission's allow-list."""

    async def _guard(identity: Identity = Depends(get_current_identity)) -> Identity:
        if not has_permission(identity.role, permission):
            logger.warning(
                "User %s (%s) denied: missing permission %s",
                identity.user_id,
                identity.role.value,
                permission.value,
            )
            raise AuthorizationError(f"User does not have permission: {permission.value}")
        return identity

    return _guard
