"""Roles and role-based permissions."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    FRANCHISE_OWNER = "franchise-owner"
    DEALER = "dealer"
    MANAGER = "manager"


class Permission(str, Enum):
    MANAGE_CHECKLISTS = "manage_checklists"
    VIEW_ALL_DEALERS = "view_all_dealers"
    MANAGE_TENANT = "manage_tenant"


ROLE_PERMISSIONS: dict[Permission, frozenset[Role]] = {
    Permission.MANAGE_CHECKLISTS: frozenset({Role.FRANCHISE_OWNER, Role.MANAGER, Role.DEALER}),
    Permission.VIEW_ALL_DEALERS: frozenset({Role.FRANCHISE_OWNER}),
    Permission.MANAGE_TENANT: frozenset({Role.FRANCHISE_OWNER}),
}

_unmapped = set(Permission) - set(ROLE_PERMISSIONS)
if _unmapped:
    raise RuntimeError(f"Permissions without a role mapping: {sorted(p.value for p in _unmapped)}")


def has_permission(role: Role, permission: Permission) -> bool:
    return role in ROLE_PERMISSIONS[permission]
