"""
User model — authentication, tenant membership & role-based access control.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, UniqueConstraint

from franchise_saas.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),)

    id: str = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))  # type: ignore[assignment]
    email: str = Column(String(320), nullable=False, index=True)  # type: ignore[assignment]
    hashed_password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    role: str = Column(String(32), nullable=False)  # type: ignore[assignment]
    # franchise-owner | dealer | manager
    tenant_id: str = Column(String(64), nullable=False, index=True)  # type: ignore[assignment]
    first_name: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    last_name: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    avatar: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
