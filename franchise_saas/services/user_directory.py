"""
User Directory — registration, lookup, profile updates and tenant listings.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from franchise_saas.core.exceptions import (AuthenticationError, ConflictError,
                                            NotFoundError, ValidationError)
from franchise_saas.core.permissions import Role
from franchise_saas.core.security import get_password_hash, verify_password
from franchise_saas.models.user import User
from franchise_saas.schemas.user import UserRegister, UserUpdate

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "phone", "avatar")


class UserDirectory:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_email(self, email: str, tenant_id: str | None = None) -> User | None:
        """Look up a user by email, scoped to ``tenant_id`` when one is given.

        Emails are only unique per tenant; an unscoped lookup that matches
        accounts in several tenants is rejected so the caller can retry with
        an explicit tenant.
        """
        query = select(User).where(User.email == email.strip().lower())
        if tenant_id is not None:
            query = query.where(User.tenant_id == tenant_id)
        result = await self.db.execute(query.limit(2))
        users = list(result.scalars().all())
        if len(users) > 1:
            raise ValidationError(
                "This email is registered in several franchise networks; provide tenant_id",
                error="Ambiguous account",
            )
        return users[0] if users else None

    async def get_by_id(self, user_id: str) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create(self, registration: UserRegister) -> User:
        if await self.get_by_email(registration.email, registration.tenant_id) is not None:
            raise ConflictError("A user with this email already exists", error="User already exists")

        user = User(
            email=registration.email,
            hashed_password=get_password_hash(registration.password),
            role=registration.role.value,
            tenant_id=registration.tenant_id,
            first_name=registration.first_name,
            last_name=registration.last_name,
            phone=registration.phone,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(
                "A user with this email already exists", error="User already exists"
            ) from exc
        await self.db.refresh(user)
        logger.info("Registered %s user %s in tenant %s", user.role, user.id, user.tenant_id)
        return user

    async def authenticate(self, email: str, password: str, tenant_id: str | None = None) -> User:
        user = await self.get_by_email(email, tenant_id)
        if user is None or not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid email or password", error="Invalid credentials")
        return user

    async def update(self, user_id: str, changes: UserUpdate) -> User:
        """Apply a partial profile update; empty or omitted fields are left as they are."""
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFoundError("The requested user does not exist", error="User not found")

        provided = changes.model_dump(exclude_unset=True)
        for field in PROFILE_FIELDS:
            value = provided.get(field)
            if value:
                setattr(user, field, value)
        user.updated_at = datetime.now(timezone.utc)

        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Updated profile of user %s", user_id)
        return user

    async def list_by_tenant(self, tenant_id: str, role: Role = Role.DEALER) -> list[User]:
        result = await self.db.execute(
            select(User)
            .where(User.tenant_id == tenant_id, User.role == role.value)
            .order_by(User.created_at, User.email)
        )
        return list(result.scalars().all())
