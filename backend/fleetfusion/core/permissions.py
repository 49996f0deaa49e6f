"""
ABAC permission model.

A permission is the string ``"<action>:<resource>"``. Users do not carry
individual grants: their role maps to a fixed permission set, and
``manage:<resource>`` implies every other action on that resource.
"""
from dataclasses import dataclass, field
import uuid


ROLES = ("admin", "dispatcher", "driver", "compliance", "accountant", "viewer")
DEFAULT_ROLE = "viewer"

ACTIONS = ("create", "read", "update", "delete", "manage", "approve", "assign", "report")
RESOURCES = (
    "organization",
    "user",
    "driver",
    "vehicle",
    "load",
    "document",
    "hos_log",
    "compliance",
    "ifta_report",
    "billing",
    "analytics",
)


def create_permission(action: str, resource: str) -> str:
    return f"{action}:{resource}"


def parse_permission(permission: str) -> tuple[str, str] | None:
    parts = permission.split(":")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def _grants(*pairs: tuple[str, tuple[str, ...]]) -> frozenset[str]:
    return frozenset(
        create_permission(action, resource)
        for resource, actions in pairs
        for action in actions
    )


ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    "admin": frozenset(create_permission("manage", r) for r in RESOURCES),
    "dispatcher": _grants(
        ("driver", ("read", "update")),
        ("vehicle", ("read", "update")),
        ("load", ("create", "read", "update", "assign")),
        ("document", ("read",)),
        ("hos_log", ("create", "read")),
        ("compliance", ("read",)),
        ("organization", ("read",)),
    ),
    "driver": _grants(
        ("load", ("read",)),
        ("document", ("read",)),
        ("organization", ("read",)),
    ),
    "compliance": _grants(
        ("driver", ("read",)),
        ("vehicle", ("read",)),
        ("document", ("create", "read", "update", "delete", "approve")),
        ("hos_log", ("create", "read")),
        ("compliance", ("manage",)),
        ("organization", ("read",)),
    ),
    "accountant": _grants(
        ("ifta_report", ("create", "read", "update", "report")),
        ("billing", ("read",)),
        ("analytics", ("read",)),
        ("organization", ("read",)),
    ),
    "viewer": _grants(
        ("driver", ("read",)),
        ("vehicle", ("read",)),
        ("load", ("read",)),
        ("compliance", ("read",)),
        ("organization", ("read",)),
    ),
}


def get_permissions_for_role(role: str) -> frozenset[str]:
    return ROLE_PERMISSIONS.get(role, frozenset())


@dataclass(frozen=True)
class UserContext:
    user_id: uuid.UUID
    organization_id: uuid.UUID
    role: str
    is_active: bool = True
    driver_id: uuid.UUID | None = None  # Driver record linked to this login, if any
    permissions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def for_user(cls, user, driver_id: uuid.UUID | None = None) -> "UserContext":
        return cls(
            user_id=user.id,
            organization_id=user.organization_id,
            role=user.role,
            is_active=user.is_active,
            driver_id=driver_id,
            permissions=get_permissions_for_role(user.role),
        )


def has_permission(user: UserContext | None, permission: str) -> bool:
    if user is None or not user.is_active:
        return False
    return permission in user.permissions


def has_resource_permission(user: UserContext | None, action: str, resource: str) -> bool:
    return has_permission(user, create_permission(action, resource)) or has_permission(
        user, create_permission("manage", resource)
    )


def has_any_permission(user: UserContext | None, permissions: list[str]) -> bool:
    if user is None or not user.is_active:
        return False
    return any(p in user.permissions for p in permissions)


def has_all_permissions(user: UserContext | None, permissions: list[str]) -> bool:
    if user is None or not user.is_active:
        return False
    return all(p in user.permissions for p in permissions)


def has_role(user: UserContext | None, role: str) -> bool:
    if user is None or not user.is_active:
        return False
    return user.role == role


def has_any_role(user: UserContext | None, roles: list[str]) -> bool:
    if user is None or not user.is_active:
        return False
    return user.role in roles


def is_admin(user: UserContext | None) -> bool:
    return has_role(user, "admin")


def belongs_to_organization(user: UserContext | None, organization_id: uuid.UUID) -> bool:
    if user is None:
        return False
    return user.organization_id == organization_id


def can_access_driver(user: UserContext | None, driver_id: uuid.UUID) -> bool:
    """Broad driver read access, or a driver looking at their own record."""
    if user is None:
        return False
    if has_resource_permission(user, "read", "driver"):
        return True
    return has_role(user, "driver") and user.driver_id == driver_id


# Route prefix → any of these permissions grants access
PROTECTED_ROUTES: dict[str, list[str]] = {
    "/drivers": ["read:driver", "manage:driver"],
    "/vehicles": ["read:vehicle", "manage:vehicle"],
    "/compliance": ["read:compliance", "manage:compliance"],
    "/ifta": ["read:ifta_report", "manage:ifta_report"],
    "/analytics": ["read:analytics", "manage:analytics"],
    "/settings": ["update:organization", "manage:organization"],
    "/settings/billing": ["read:billing", "manage:billing"],
    "/settings/users": ["read:user", "manage:user"],
    "/settings/audit": ["manage:organization"],
}


def can_access_route(user: UserContext | None, path: str) -> bool:
    required = PROTECTED_ROUTES.get(path)
    if not required:
        return True  # public route
    return has_any_permission(user, required)
