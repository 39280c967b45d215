"""
Password hashing (bcrypt) and JWT session tokens.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from franchise_saas.core.config import HMAC_ALGORITHMS, Settings
from franchise_saas.core.exceptions import AuthenticationError, InternalError
from franchise_saas.core.permissions import Role
from franchise_saas.schemas.token import TokenClaims, TokenPair, TokenType

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def get_password_hash(plain: str) -> str:
    try:
        return pwd_context.hash(plain)
    except (ValueError, TypeError) as exc:
        raise InternalError("Password hashing failed") from exc


# ── JWT tokens ──────────────────────────────────────────────────────
def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and validates signed access / refresh token pairs.

    Both tokens of a pair carry the same identity claims (``sub``, ``email``,
    ``role``, ``tenant_id``, ``iat``) and differ only in ``exp`` and ``type``.
    Refresh tokens are not tracked: a valid one can be replayed until it expires.
    """

    def __init__(
        self,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if settings.ALGORITHM not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {settings.ALGORITHM}")
        self._secret = settings.SECRET_KEY
        self._algorithm = settings.ALGORITHM
        self._access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self._refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        self._clock = clock

    @property
    def access_ttl(self) -> timedelta:
        return self._access_ttl

    @property
    def refresh_ttl(self) -> timedelta:
        return self._refresh_ttl

    def issue(self, identity: Any) -> TokenPair:
        """Sign a fresh pair for anything exposing id/email/role/tenant_id."""
        claims = {
            "sub": str(identity.id),
            "email": identity.email,
            "role": Role(identity.role).value,
            "tenant_id": identity.tenant_id,
        }
        return self._issue_pair(claims)

    def validate(self, token: str, token_type: TokenType = TokenType.ACCESS) -> TokenClaims:
        """Return the token's claims or raise ``AuthenticationError``."""
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise AuthenticationError("The provided token is malformed", error="Invalid token") from exc

        if header.get("alg") != self._algorithm:
            logger.warning("Rejected token signed with unexpected algorithm %r", header.get("alg"))
            raise AuthenticationError("Unexpected signing method", error="Invalid token")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_iat": True, "require_sub": True},
            )
        except JWTError as exc:
            raise AuthenticationError(
                "The provided token is invalid or expired", error="Invalid token"
            ) from exc

        try:
            claims = TokenClaims.model_validate(payload)
        except PydanticValidationError as exc:
            raise AuthenticationError(
                "Token does not contain valid identity claims", error="Invalid token claims"
            ) from exc

        if claims.type != token_type:
            raise AuthenticationError(
                f"Expected a {token_type.value} token", error="Invalid token"
            )
        return claims

    def refresh(self, refresh_token: str) -> TokenPair:
        claims = self.validate(refresh_token, TokenType.REFRESH)
        return self._issue_pair(
            {
                "sub": claims.sub,
                "email": claims.email,
                "role": claims.role.value,
                "tenant_id": claims.tenant_id,
            }
        )

    def _issue_pair(self, claims: dict[str, Any]) -> TokenPair:
        now = self._clock()
        return TokenPair(
            access_token=self._encode(claims, TokenType.ACCESS, now, now + self._access_ttl),
            refresh_token=self._encode(claims, TokenType.REFRESH, now, now + self._refresh_ttl),
        )

    def _encode(
        self,
        claims: dict[str, Any],
        token_type: TokenType,
        issued_at: datetime,
        expires_at: datetime,
    ) -> str:
        payload = {
            **claims,
            "type": token_type.value,
            "iat": issued_at,
            "exp": expires_at,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except JWTError as exc:
            raise InternalError("Token generation failed") from exc
