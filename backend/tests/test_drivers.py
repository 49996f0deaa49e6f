"""
Tests for /api/v1/drivers – CRUD, permissions, tenant isolation, audit log.
"""
import pytest
from sqlalchemy import select

from fleetfusion.models.audit import AuditLog
from fleetfusion.models.driver import Driver
from tests.conftest import auth_headers, make_user

BASE = "/api/v1/drivers"


def driver_body(**overrides) -> dict:
    body = {
        "first_name": "Mike",
        "last_name": "Carter",
        "employee_id": "D-100",
        "license_number": "CO1234567",
        "license_state": "CO",
        "license_class": "A",
        "license_expiration": "2027-06-30",
    }
    body.update(overrides)
    return body


# ── Create ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_admin_creates_driver(client, db, admin_token):
    resp = await client.post(BASE, json=driver_body(), headers=auth_headers(admin_token))
    assert resp.status_code == 201
    data = resp.json()
    assert data["employee_id"] == "D-100"
    assert data["status"] == "active"

    audit = await db.execute(select(AuditLog).where(AuditLog.entity_type == "driver"))
    entries = audit.scalars().all()
    assert [e.action for e in entries] == ["create"]


@pytest.mark.asyncio
async def test_duplicate_employee_id_conflicts(client, admin_token, driver):
    resp = await client.post(BASE, json=driver_body(employee_id="D-001"), headers=auth_headers(admin_token))
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_same_employee_id_in_other_organization_is_fine(client, admin_token, foreign_driver):
    resp = await client.post(BASE, json=driver_body(employee_id="D-001"), headers=auth_headers(admin_token))
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_dispatcher_cannot_create_driver(client, dispatcher_token):
    resp = await client.post(BASE, json=driver_body(), headers=auth_headers(dispatcher_token))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_link_to_user_of_other_organization_is_rejected(client, db, admin_token, other_organization):
    stranger = await make_user(db, other_organization, "driver")
    resp = await client.post(BASE, json=driver_body(user_id=str(stranger.id)), headers=auth_headers(admin_token))
    assert resp.status_code == 404


# ── Read ──────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_drivers_is_scoped_to_organization(client, viewer_token, driver, other_driver, foreign_driver):
    resp = await client.get(BASE, headers=auth_headers(viewer_token))
    assert resp.status_code == 200
    ids = {d["id"] for d in resp.json()}
    assert ids == {str(driver.id), str(other_driver.id)}


@pytest.mark.asyncio
async def test_list_drivers_filters_by_status(client, db, viewer_token, driver, other_driver):
    other_driver.status = "inactive"
    await db.commit()

    resp = await client.get(BASE, params={"status": "inactive"}, headers=auth_headers(viewer_token))
    assert [d["id"] for d in resp.json()] == [str(other_driver.id)]


@pytest.mark.asyncio
async def test_driver_role_cannot_list_drivers(client, driver, driver_token):
    resp = await client.get(BASE, headers=auth_headers(driver_token))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_driver_reads_own_record_only(client, driver, other_driver, driver_token):
    resp = await client.get(f"{BASE}/{driver.id}", headers=auth_headers(driver_token))
    assert resp.status_code == 200

    resp = await client.get(f"{BASE}/{other_driver.id}", headers=auth_headers(driver_token))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_foreign_driver_is_not_found(client, admin_token, foreign_driver):
    resp = await client.get(f"{BASE}/{foreign_driver.id}", headers=auth_headers(admin_token))
    assert resp.status_code == 404


# ── Update / delete ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_dispatcher_updates_driver(client, db, dispatcher_token, driver):
    resp = await client.put(
        f"{BASE}/{driver.id}", json={"phone": "+1 303 555 0100"}, headers=auth_headers(dispatcher_token)
    )
    assert resp.status_code == 200
    assert resp.json()["phone"] == "+1 303 555 0100"

    audit = await db.execute(select(AuditLog).where(AuditLog.action == "update"))
    entry = audit.scalar_one()
    assert entry.old_values == {"phone": None}
    assert entry.new_values == {"phone": "+1 303 555 0100"}


@pytest.mark.asyncio
async def test_update_to_taken_employee_id_conflicts(client, admin_token, driver, other_driver):
    resp = await client.put(
        f"{BASE}/{other_driver.id}", json={"employee_id": "D-001"}, headers=auth_headers(admin_token)
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_viewer_cannot_update_driver(client, viewer_token, driver):
    resp = await client.put(f"{BASE}/{driver.id}", json={"phone": "1"}, headers=auth_headers(viewer_token))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_delete_terminates_driver(client, db, admin_token, driver):
    resp = await client.delete(f"{BASE}/{driver.id}", headers=auth_headers(admin_token))
    assert resp.status_code == 204

    result = await db.execute(
        select(Driver).where(Driver.id == driver.id).execution_options(populate_existing=True)
    )
    assert result.scalar_one().status == "terminated"


@pytest.mark.asyncio
async def test_dispatcher_cannot_delete_driver(client, dispatcher_token, driver):
    resp = await client.delete(f"{BASE}/{driver.id}", headers=auth_headers(dispatcher_token))
    assert resp.status_code == 403
