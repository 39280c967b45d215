"""Pydantic schemas for registration, login and user profiles."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from franchise_saas.core.permissions import Role

MIN_PASSWORD_LENGTH = 8

# Column widths in models/user.py
EMAIL_MAX = 320
TENANT_ID_MAX = 64
NAME_MAX = 100
PHONE_MAX = 30
AVATAR_MAX = 500


def _normalise_email(v: str) -> str:
    v = v.strip().lower()
    local, _, domain = v.partition("@")
    if not local or not domain or " " in v:
        raise ValueError("Invalid email address")
    return v


class UserRegister(BaseModel):
    email: str = Field(max_length=EMAIL_MAX)
    password: str
    role: Role
    tenant_id: str = Field(max_length=TENANT_ID_MAX)
    first_name: str | None = Field(default=None, max_length=NAME_MAX)
    last_name: str | None = Field(default=None, max_length=NAME_MAX)
    phone: str | None = Field(default=None, max_length=PHONE_MAX)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return v

    @field_validator("tenant_id")
    @classmethod
    def _tenant(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("tenant_id must not be empty")
        return v


class UserLogin(BaseModel):
    email: str
    password: str
    tenant_id: str | None = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)


class UserRead(BaseModel):
    id: str
    email: str
    role: Role
    tenant_id: str
    first_name: str | None
    last_name: str | None
    phone: str | None
    avatar: str | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    first_name: str | None = Field(default=None, max_length=NAME_MAX)
    last_name: str | None = Field(default=None, max_length=NAME_MAX)
    phone: str | None = Field(default=None, max_length=PHONE_MAX)
    avatar: str | None = Field(default=None, max_length=AVATAR_MAX)


class AuthResponse(BaseModel):
    user: UserRead
    token: str
    refresh_token: str
    token_type: str = "bearer"
