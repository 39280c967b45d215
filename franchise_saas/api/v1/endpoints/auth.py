"""
Auth endpoints — registration, login, token refresh, logout and ``/me``.

The routes are built per application by ``build_router`` so the rate limits
are tracked by that application's own limiter.
"""

import logging

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter

from franchise_saas.api.v1.deps import (get_current_identity, get_token_service,
                                        get_user_directory)
from franchise_saas.core.exceptions import NotFoundError
from franchise_saas.core.rate_limit import (LOGIN_LIMIT, REFRESH_LIMIT,
                                            REGISTER_LIMIT)
from franchise_saas.core.security import TokenService
from franchise_saas.models.user import User
from franchise_saas.schemas.common import MessageResponse
from franchise_saas.schemas.token import Identity, RefreshRequest, TokenResponse
from franchise_saas.schemas.user import (AuthResponse, UserLogin, UserRead,
                                         UserRegister)
from franchise_saas.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


def _auth_response(user: User, tokens: TokenService) -> AuthResponse:
    pair = tokens.issue(user)
    return AuthResponse(
        user=UserRead.model_validate(user),
        token=pair.access_token,
        refresh_token=pair.refresh_token,
    )


def build_router(limiter: Limiter) -> APIRouter:
    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("/register", response_model=AuthResponse, status_code=201)
    @limiter.limit(REGISTER_LIMIT)
    async def register(
        request: Request,
        body: UserRegister,
        users: UserDirectory = Depends(get_user_directory),
        tokens: TokenService = Depends(get_token_service),
    ) -> AuthResponse:
        """Create an account and return it with a fresh token pair."""
        user = await users.create(body)
        return _auth_response(user, tokens)

    @router.post("/login", response_model=AuthResponse)
    @limiter.limit(LOGIN_LIMIT)
    async def login(
        request: Request,
        body: UserLogin,
        users: UserDirectory = Depends(get_user_directory),
        tokens: TokenService = Depends(get_token_service),
    ) -> AuthResponse:
        """Authenticate with email/password."""
        user = await users.authenticate(body.email, body.password, body.tenant_id)
        logger.info("User %s logged in", user.id)
        return _auth_response(user, tokens)

    @router.post("/refresh", response_model=TokenResponse)
    @limiter.limit(REFRESH_LIMIT)
    async def refresh(
        request: Request,
        body: RefreshRequest,
        tokens: TokenService = Depends(get_token_service),
    ) -> TokenResponse:
        """Exchange a refresh token for a new pair.

        Refresh tokens are not rotated or revoked; any unexpired one keeps working.
        """
        pair = tokens.refresh(body.refresh_token)
        return TokenResponse(token=pair.access_token, refresh_token=pair.refresh_token)

    @router.post("/logout", response_model=MessageResponse)
    async def logout(identity: Identity = Depends(get_current_identity)) -> MessageResponse:
        """Acknowledge logout. Tokens stay valid until they expire; clients discard them."""
        logger.info("User %s logged out", identity.user_id)
        return MessageResponse(message="Successfully logged out")

    @router.get("/me", response_model=UserRead)
    async def read_current_user(
        identity: Identity = Depends(get_current_identity),
        users: UserDirectory = Depends(get_user_directory),
    ) -> User:
        """Return the profile of the currently authenticated user."""
        user = await users.get_by_id(identity.user_id)
        if user is None:
            raise NotFoundError("The requested user does not exist", error="User not found")
        return user

    return router
