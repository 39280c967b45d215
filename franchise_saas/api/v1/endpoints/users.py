"""
Profile endpoints for the authenticated user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from franchise_saas.api.v1.deps import get_current_identity, get_user_directory
from franchise_saas.core.exceptions import NotFoundError
from franchise_saas.models.user import User
from franchise_saas.schemas.token import Identity
from franchise_saas.schemas.user import UserRead, UserUpdate
from franchise_saas.services.user_directory import UserDirectory

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserRead)
async def get_profile(
    identity: Identity = Depends(get_current_identity),
    users: UserDirectory = Depends(get_user_directory),
) -> User:
    user = await users.get_by_id(identity.user_id)
    if user is None:
        raise NotFoundError("The requested user does not exist", error="User not found")
    return user


@router.put("/profile", response_model=UserRead)
async def update_profile(
    body: UserUpdate,
    identity: Identity = Depends(get_current_identity),
    users: UserDirectory = Depends(get_user_directory),
) -> User:
    """Update profile fields; omitted or empty fields keep their current value."""
    return await users.update(identity.user_id, body)
