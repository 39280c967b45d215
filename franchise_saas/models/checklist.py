"""
Checklist & Task models — the dealer's daily work items and their KPI score.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (Column, DateTime, Float, ForeignKey, Index, Integer,
                        String, Text)
from sqlalchemy.orm import relationship

from franchise_saas.db.base import Base


class ProgressStatus(str, Enum):
    """Shared by checklists and tasks."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class Checklist(Base):
    __tablename__ = "checklists"
    __table_args__ = (Index("ix_checklists_user_created", "user_id", "created_at"),)

    id: str = Column(String(36), primary_key=True, default=_new_id)  # type: ignore[assignment]
    title: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    user_id: str = Column(String(36), ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]
    tenant_id: str = Column(String(64), nullable=False, index=True)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=ProgressStatus.PENDING.value,
    )
    kpi_score: float = Column(Float, nullable=False, default=0.0)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]

    tasks = relationship(
        "Task",
        back_populates="checklist",
        cascade="all, delete-orphan",
        order_by="Task.position",
        lazy="selectin",
    )


class Task(Base):
    __tablename__ = "tasks"

    id: str = Column(String(36), primary_key=True, default=_new_id)  # type: ignore[assignment]
    checklist_id: str = Column(  # type: ignore[assignment]
        String(36), ForeignKey("checklists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=ProgressStatus.PENDING.value,
    )
    position: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]

    checklist = relationship("Checklist", back_populates="tasks")
