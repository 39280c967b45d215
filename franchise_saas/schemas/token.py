"""Pydantic schemas for JWT tokens and the authenticated identity."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from franchise_saas.core.permissions import Role


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class TokenClaims(BaseModel):
    sub: str
    email: str
    role: Role
    tenant_id: str
    iat: int
    exp: int
    type: TokenType


class Identity(BaseModel):
    """Caller identity bound to the request after token validation."""

    user_id: str
    email: str
    role: Role
    tenant_id: str

    model_config = {"frozen": True}

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> Identity:
        return cls(
            user_id=claims.sub,
            email=claims.email,
            role=claims.role,
            tenant_id=claims.tenant_id,
        )


class TokenResponse(BaseModel):
    token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str
