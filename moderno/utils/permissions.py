"""
Permission keys and role capability table.

Roles are presets only: every route checks a single Permission, and the
table below decides which roles carry it.
"""

from enum import Enum
from typing import Dict, FrozenSet, List


class Permission(str, Enum):
    CLIENTS_VIEW = "clients:view"
    CLIENTS_EDIT = "clients:edit"
    CLIENTS_DELETE = "clients:delete"
    TRANSACTIONS_VIEW = "transactions:view"
    TRANSACTIONS_EDIT = "transactions:edit"
    DEALS_VIEW = "deals:view"
    DEALS_EDIT = "deals:edit"
    INTERACTIONS_VIEW = "interactions:view"
    INTERACTIONS_EDIT = "interactions:edit"
    INQUIRIES_VIEW = "inquiries:view"
    INQUIRIES_EDIT = "inquiries:edit"
    DASHBOARD_VIEW = "dashboard:view"


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    VIEWER = "viewer"


ALL_PERMISSIONS: FrozenSet[Permission] = frozenset(Permission)

ROLE_PERMISSIONS: Dict[Role, FrozenSet[Permission]] = {
    Role.ADMIN: ALL_PERMISSIONS,
    Role.MANAGER: ALL_PERMISSIONS - {Permission.CLIENTS_DELETE},
    Role.VIEWER: frozenset(p for p in Permission if p.value.endswith(":view")),
}


def permissions_for_role(role: str) -> FrozenSet[Permission]:
    """Unknown roles get no permissions"""
    try:
        return ROLE_PERMISSIONS[Role(role)]
    except ValueError:
        return frozenset()


def has_permission(role: str, permission: Permission) -> bool:
    return permission in permissions_for_role(role)


def permission_names(role: str) -> List[str]:
    return sorted(p.value for p in permissions_for_role(role))
