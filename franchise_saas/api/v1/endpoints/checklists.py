"""
Checklist CRUD + completion.

Every route is scoped to the authenticated owner: a checklist that exists but
belongs to someone else is reported as not found.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response

from franchise_saas.api.v1.deps import get_checklist_store, require_permission
from franchise_saas.core.exceptions import NotFoundError
from franchise_saas.core.permissions import Permission
from franchise_saas.models.checklist import Checklist, ProgressStatus
from franchise_saas.schemas.checklist import (ChecklistCreate, ChecklistRead,
                                              ChecklistUpdate)
from franchise_saas.schemas.common import MessageResponse
from franchise_saas.schemas.token import Identity
from franchise_saas.services.checklist_store import ChecklistStore

router = APIRouter(prefix="/checklists", tags=["checklists"])

can_manage_checklists = require_permission(Permission.MANAGE_CHECKLISTS)


@router.get("", response_model=list[ChecklistRead])
async def list_checklists(
    response: Response,
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    status: ProgressStatus | None = None,
    identity: Identity = Depends(can_manage_checklists),
    store: ChecklistStore = Depends(get_checklist_store),
) -> list[Checklist]:
    """List the caller's checklists, newest first. Total count in ``X-Total-Count``."""
    result = await store.list_by_user(identity.user_id, page, limit, status)
    response.headers["X-Total-Count"] = str(result.total)
    return result.items


@router.post("", response_model=ChecklistRead, status_code=201)
async def create_checklist(
    body: ChecklistCreate,
    identity: Identity = Depends(can_manage_checklists),
    store: ChecklistStore = Depends(get_checklist_store),
) -> Checklist:
    return await store.create(identity.user_id, identity.tenant_id, body)


@router.get("/{checklist_id}", response_model=ChecklistRead)
async def get_checklist(
    checklist_id: uuid.UUID,
    identity: Identity = Depends(can_manage_checklists),
    store: ChecklistStore = Depends(get_checklist_store),
) -> Checklist:
    checklist = await store.get_by_id(str(checklist_id), identity.user_id)
    if checklist is None:
        raise NotFoundError("The requested checklist does not exist", error="Checklist not found")
    return checklist


@router.put("/{checklist_id}", response_model=ChecklistRead)
async def update_checklist(
    checklist_id: uuid.UUID,
    body: ChecklistUpdate,
    identity: Identity = Depends(can_manage_checklists),
    store: ChecklistStore = Depends(get_checklist_store),
) -> Checklist:
    return await store.update(str(checklist_id), identity.user_id, body)


@router.delete("/{checklist_id}", response_model=MessageResponse)
async def delete_checklist(
    checklist_id: uuid.UUID,
    identity: Identity = Depends(can_manage_checklists),
    store: ChecklistStore = Depends(get_checklist_store),
) -> MessageResponse:
    await store.delete(str(checklist_id), identity.user_id)
    return MessageResponse(message="Checklist deleted successfully")


@router.post("/{checklist_id}/complete", response_model=ChecklistRead)
async def complete_checklist(
    checklist_id: uuid.UUID,
    identity: Identity = Depends(can_manage_checklists),
    store: ChecklistStore = Depends(get_checklist_store),
) -> Checklist:
    """Mark every task completed and set the KPI score to 100."""
    return await store.complete(str(checklist_id), identity.user_id)
