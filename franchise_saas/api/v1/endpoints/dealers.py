"""
Dealer listing for franchise owners, scoped to the caller's tenant.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query

from franchise_saas.api.v1.deps import get_user_directory, require_role
from franchise_saas.core.exceptions import NotFoundError
from franchise_saas.core.permissions import Role
from franchise_saas.models.user import User
from franchise_saas.schemas.token import Identity
from franchise_saas.schemas.user import UserRead
from franchise_saas.services.user_directory import UserDirectory

router = APIRouter(prefix="/dealers", tags=["dealers"])

require_franchise_owner = require_role(Role.FRANCHISE_OWNER)


@router.get("", response_model=list[UserRead])
async def list_dealers(
    role: Role = Query(default=Role.DEALER, alias="type"),
    owner: Identity = Depends(require_franchise_owner),
    users: UserDirectory = Depends(get_user_directory),
) -> list[User]:
    """List users of the caller's franchise network (dealers unless ``type`` says otherwise)."""
    return await users.list_by_tenant(owner.tenant_id, role)


@router.get("/{dealer_id}", response_model=UserRead)
async def get_dealer(
    dealer_id: uuid.UUID,
    owner: Identity = Depends(require_franchise_owner),
    users: UserDirectory = Depends(get_user_directory),
) -> User:
    dealer = await users.get_by_id(str(dealer_id))
    if dealer is None or dealer.tenant_id != owner.tenant_id or dealer.role != Role.DEALER.value:
        raise NotFoundError("The requested dealer does not exist", error="Dealer not found")
    return dealer
