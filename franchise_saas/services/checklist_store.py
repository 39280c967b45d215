"""
Checklist Store — ownership-scoped checklist CRUD and KPI scoring.

A checklist's ``status`` and ``kpi_score`` are never taken from the client: they
are recomputed whenever the task set is replaced, and ``complete`` forces them
to completed and 100.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from franchise_saas.core.exceptions import NotFoundError
from franchise_saas.models.checklist import Checklist, ProgressStatus, Task
from franchise_saas.schemas.checklist import (ChecklistCreate, ChecklistUpdate,
                                              TaskWrite)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# ── Derivation ──────────────────────────────────────────────────────
def derive_status(statuses: Iterable[str]) -> ProgressStatus:
    """completed if every task is, in_progress if any task has started, else pending."""
    statuses = [ProgressStatus(s) for s in statuses]
    if not statuses:
        return ProgressStatus.PENDING
    completed = statuses.count(ProgressStatus.COMPLETED)
    if completed == len(statuses):
        return ProgressStatus.COMPLETED
    if completed or ProgressStatus.IN_PROGRESS in statuses:
        return ProgressStatus.IN_PROGRESS
    return ProgressStatus.PENDING


def compute_kpi_score(statuses: Iterable[str]) -> float:
    """Percentage of completed tasks; 0 for an empty checklist."""
    statuses = [ProgressStatus(s) for s in statuses]
    if not statuses:
        return 0.0
    return statuses.count(ProgressStatus.COMPLETED) / len(statuses) * 100.0


def _parse_positive_int(raw: str | int | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def normalise_page(page: str | int | None, page_size: str | int | None) -> tuple[int, int]:
    """Page defaults to 1; page size defaults to 10 and is clamped to [1, 100]."""
    parsed_page = _parse_positive_int(page)
    if parsed_page is None or parsed_page < 1:
        parsed_page = 1

    parsed_size = _parse_positive_int(page_size)
    if parsed_size is None:
        parsed_size = DEFAULT_PAGE_SIZE
    parsed_size = max(1, min(MAX_PAGE_SIZE, parsed_size))
    return parsed_page, parsed_size


@dataclass
class ChecklistPage:
    items: list[Checklist]
    total: int
    page: int
    page_size: int


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _refresh_progress(checklist: Checklist) -> None:
    statuses = [task.status for task in checklist.tasks]
    checklist.status = derive_status(statuses).value
    checklist.kpi_score = compute_kpi_score(statuses)


def _ordered(tasks: list[TaskWrite]) -> list[tuple[int, TaskWrite]]:
    """Pair each task with its position (index + 1 when omitted), sorted stably."""
    positioned = [
        (task.position if task.position is not None else index + 1, task)
        for index, task in enumerate(tasks)
    ]
    return sorted(positioned, key=lambda pair: pair[0])


# ── Store ───────────────────────────────────────────────────────────
class ChecklistStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_by_user(
        self,
        user_id: str,
        page: str | int | None = None,
        page_size: str | int | None = None,
        status: ProgressStatus | None = None,
    ) -> ChecklistPage:
        page_no, size = normalise_page(page, page_size)

        filters = [Checklist.user_id == user_id]
        if status is not None:
            filters.append(Checklist.status == status.value)

        total = await self.db.execute(select(func.count(Checklist.id)).where(*filters))
        result = await self.db.execute(
            select(Checklist)
            .where(*filters)
            .order_by(Checklist.created_at.desc(), Checklist.id)
            .offset((page_no - 1) * size)
            .limit(size)
        )
        return ChecklistPage(
            items=list(result.scalars().all()),
            total=total.scalar() or 0,
            page=page_no,
            page_size=size,
        )

    async def get_by_id(self, checklist_id: str, user_id: str) -> Checklist | None:
        result = await self.db.execute(
            select(Checklist).where(Checklist.id == checklist_id, Checklist.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def _get_owned(self, checklist_id: str, user_id: str) -> Checklist:
        checklist = await self.get_by_id(checklist_id, user_id)
        if checklist is None:
            raise NotFoundError(
                "The requested checklist does not exist", error="Checklist not found"
            )
        return checklist

    async def create(self, user_id: str, tenant_id: str, data: ChecklistCreate) -> Checklist:
        now = _utcnow()
        checklist = Checklist(
            title=data.title,
            description=data.description,
            user_id=user_id,
            tenant_id=tenant_id,
            created_at=now,
            updated_at=now,
            tasks=[
                Task(
                    title=task.title,
                    description=task.description,
                    status=task.status.value,
                    position=position,
                    created_at=now,
                    updated_at=now,
                )
                for position, task in _ordered(data.tasks)
            ],
        )
        _refresh_progress(checklist)

        self.db.add(checklist)
        await self.db.commit()
        logger.info(
            "Created checklist %s for user %s (%d tasks)", checklist.id, user_id, len(checklist.tasks)
        )
        return checklist

    async def update(self, checklist_id: str, user_id: str, changes: ChecklistUpdate) -> Checklist:
        checklist = await self._get_owned(checklist_id, user_id)
        now = _utcnow()

        if changes.title and changes.title.strip():
            checklist.title = changes.title.strip()
        if changes.description:
            checklist.description = changes.description
        if changes.tasks is not None:
            checklist.tasks = self._merge_tasks(checklist, changes.tasks, now)
            _refresh_progress(checklist)
        if changes.status is not None:
            logger.debug(
                "Ignoring explicit status %s for checklist %s; status follows its tasks",
                changes.status.value,
                checklist_id,
            )

        checklist.updated_at = now

        await self.db.commit()
        logger.info("Updated checklist %s", checklist_id)
        return checklist

    @staticmethod
    def _merge_tasks(checklist: Checklist, incoming: list[TaskWrite], now: datetime) -> list[Task]:
        """Replace the task set, updating tasks whose id is already on the checklist."""
        existing = {task.id: task for task in checklist.tasks}
        merged: list[Task] = []
        for position, data in _ordered(incoming):
            task = existing.pop(data.id, None) if data.id else None
            if task is None:
                task = Task(created_at=now)
            task.title = data.title
            task.description = data.description
            task.status = data.status.value
            task.position = position
            task.updated_at = now
            merged.append(task)
        return merged

    async def delete(self, checklist_id: str, user_id: str) -> None:
        checklist = await self._get_owned(checklist_id, user_id)
        await self.db.delete(checklist)
        await self.db.commit()
        logger.info("Deleted checklist %s", checklist_id)

    async def complete(self, checklist_id: str, user_id: str) -> Checklist:
        """Force every task to completed and the score to 100."""
        checklist = await self._get_owned(checklist_id, user_id)
        now = _utcnow()

        for task in checklist.tasks:
            if task.status != ProgressStatus.COMPLETED.value:
                task.status = ProgressStatus.COMPLETED.value
                task.updated_at = now

        checklist.status = ProgressStatus.COMPLETED.value
        checklist.kpi_score = 100.0
        checklist.updated_at = now

        await self.db.commit()
        logger.info("Completed checklist %s", checklist_id)
        return checklist
