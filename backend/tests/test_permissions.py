"""
Unit tests for the role → permission model in core/permissions.py.
"""
import uuid
from types import SimpleNamespace

from fleetfusion.core.permissions import (
    ROLE_PERMISSIONS,
    ROLES,
    UserContext,
    belongs_to_organization,
    can_access_driver,
    can_access_route,
    create_permission,
    get_permissions_for_role,
    has_all_permissions,
    has_any_permission,
    has_any_role,
    has_permission,
    has_resource_permission,
    has_role,
    is_admin,
    parse_permission,
)

ORG_ID = uuid.uuid4()


def ctx(role: str, is_active: bool = True, driver_id=None) -> UserContext:
    user = SimpleNamespace(id=uuid.uuid4(), organization_id=ORG_ID, role=role, is_active=is_active)
    return UserContext.for_user(user, driver_id=driver_id)


# ── Permission strings ────────────────────────────────────────────────────────

def test_create_and_parse_permission():
    assert create_permission("read", "driver") == "read:driver"
    assert parse_permission("read:driver") == ("read", "driver")


def test_parse_permission_rejects_malformed_strings():
    assert parse_permission("read") is None
    assert parse_permission("read:") is None
    assert parse_permission("a:b:c") is None


def test_every_role_has_a_permission_set():
    assert set(ROLE_PERMISSIONS) == set(ROLES)
    assert get_permissions_for_role("nobody") == frozenset()


# ── Role grants ───────────────────────────────────────────────────────────────

def test_admin_manages_everything():
    admin = ctx("admin")
    assert is_admin(admin)
    for action in ("create", "read", "update", "delete", "approve"):
        assert has_resource_permission(admin, action, "driver")
        assert has_resource_permission(admin, action, "billing")


def test_manage_implies_every_action():
    compliance = ctx("compliance")
    assert not has_permission(compliance, "delete:compliance")
    assert has_resource_permission(compliance, "delete", "compliance")
    assert has_resource_permission(compliance, "read", "compliance")


def test_dispatcher_reads_and_updates_drivers_but_cannot_delete():
    dispatcher = ctx("dispatcher")
    assert has_resource_permission(dispatcher, "read", "driver")
    assert has_resource_permission(dispatcher, "update", "driver")
    assert not has_resource_permission(dispatcher, "delete", "driver")
    assert has_resource_permission(dispatcher, "create", "hos_log")


def test_viewer_is_read_only():
    viewer = ctx("viewer")
    assert has_resource_permission(viewer, "read", "driver")
    assert not has_resource_permission(viewer, "update", "driver")
    assert not has_resource_permission(viewer, "create", "hos_log")


def test_accountant_has_no_driver_access():
    accountant = ctx("accountant")
    assert has_permission(accountant, "report:ifta_report")
    assert not has_resource_permission(accountant, "read", "driver")


def test_inactive_user_has_no_permissions():
    inactive = ctx("admin", is_active=False)
    assert not has_resource_permission(inactive, "read", "driver")
    assert not has_any_permission(inactive, ["manage:driver"])
    assert not has_all_permissions(inactive, [])
    assert not has_role(inactive, "admin")
    assert not is_admin(inactive)


def test_missing_user_has_no_permissions():
    assert not has_permission(None, "read:driver")
    assert not has_any_role(None, ["admin"])
    assert not can_access_driver(None, uuid.uuid4())


def test_any_and_all_permissions():
    dispatcher = ctx("dispatcher")
    assert has_any_permission(dispatcher, ["delete:driver", "read:driver"])
    assert not has_any_permission(dispatcher, ["delete:driver"])
    assert has_all_permissions(dispatcher, ["read:driver", "update:driver"])
    assert not has_all_permissions(dispatcher, ["read:driver", "delete:driver"])


def test_roles():
    assert has_any_role(ctx("driver"), ["driver", "viewer"])
    assert not has_role(ctx("driver"), "dispatcher")


# ── Organization and driver scope ─────────────────────────────────────────────

def test_belongs_to_organization():
    user = ctx("viewer")
    assert belongs_to_organization(user, ORG_ID)
    assert not belongs_to_organization(user, uuid.uuid4())


def test_driver_can_access_only_own_record():
    own_id = uuid.uuid4()
    driver = ctx("driver", driver_id=own_id)
    assert can_access_driver(driver, own_id)
    assert not can_access_driver(driver, uuid.uuid4())


def test_unlinked_driver_login_sees_no_driver():
    assert not can_access_driver(ctx("driver"), uuid.uuid4())


def test_broad_read_grants_access_to_any_driver():
    assert can_access_driver(ctx("viewer"), uuid.uuid4())


# ── Routes ────────────────────────────────────────────────────────────────────

def test_route_access():
    assert can_access_route(ctx("viewer"), "/drivers")
    assert not can_access_route(ctx("driver"), "/drivers")
    assert can_access_route(ctx("accountant"), "/ifta")
    assert can_access_route(ctx("dispatcher"), "/vehicles")
    assert not can_access_route(ctx("driver"), "/vehicles")
    assert can_access_route(ctx("admin"), "/settings/audit")
    assert not can_access_route(ctx("compliance"), "/settings/audit")


def test_unknown_route_is_public():
    assert can_access_route(None, "/somewhere-else")
