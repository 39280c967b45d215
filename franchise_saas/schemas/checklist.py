"""Pydantic schemas for checklists and their tasks."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator

from franchise_saas.models.checklist import ProgressStatus

MAX_TITLE_LENGTH = 200


def _non_empty_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Title must not be empty")
    return _bounded_title(v)


def _bounded_title(v: str) -> str:
    if len(v) > MAX_TITLE_LENGTH:
        raise ValueError(f"Title must not exceed {MAX_TITLE_LENGTH} characters")
    return v


# ── Tasks ───────────────────────────────────────────────────────────
class TaskWrite(BaseModel):
    id: str | None = None
    title: str
    description: str | None = None
    status: ProgressStatus = ProgressStatus.PENDING
    # also accepted as "order"
    position: int | None = Field(
        default=None, ge=0, validation_alias=AliasChoices("position", "order")
    )

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _non_empty_title(v)


class TaskRead(BaseModel):
    id: str
    title: str
    description: str | None
    status: ProgressStatus
    position: int
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


# ── Checklists ──────────────────────────────────────────────────────
class ChecklistCreate(BaseModel):
    title: str
    description: str | None = None
    tasks: list[TaskWrite] = []

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _non_empty_title(v)


class ChecklistUpdate(BaseModel):
    """Partial update. ``status`` is accepted but ignored; status and score are
    recomputed only when ``tasks`` is given."""

    title: str | None = None
    description: str | None = None
    status: ProgressStatus | None = None
    tasks: list[TaskWrite] | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: str | None) -> str | None:
        # Blank titles leave the stored one unchanged
        if v is None or not v.strip():
            return v
        return _bounded_title(v.strip())


class ChecklistRead(BaseModel):
    id: str
    title: str
    description: str | None
    user_id: str
    tenant_id: str
    status: ProgressStatus
    kpi_score: float
    tasks: list[TaskRead]
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}
