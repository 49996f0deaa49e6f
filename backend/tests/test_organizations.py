"""
Tests for /api/v1/organizations/me.
"""
import pytest

from tests.conftest import auth_headers

BASE = "/api/v1/organizations/me"


@pytest.mark.asyncio
async def test_read_own_organization(client, organization, driver, driver_token):
    resp = await client.get(BASE, headers=auth_headers(driver_token))
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == str(organization.id)
    assert data["timezone"] == "America/Denver"
    assert data["subscription_tier"] == "free"


@pytest.mark.asyncio
async def test_admin_updates_business_data(client, admin_token):
    resp = await client.put(
        BASE,
        json={"dot_number": "3141592", "timezone": "America/Chicago", "billing_email": "ap@freight.dev"},
        headers=auth_headers(admin_token),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["dot_number"] == "3141592"
    assert data["timezone"] == "America/Chicago"
    # Untouched fields keep their values
    assert data["name"] == "Test Freight"


@pytest.mark.asyncio
async def test_unknown_time_zone_is_rejected(client, admin_token):
    resp = await client.put(BASE, json={"timezone": "Europe/Atlantis"}, headers=auth_headers(admin_token))
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_dispatcher_cannot_update_organization(client, dispatcher_token):
    resp = await client.put(BASE, json={"phone": "555"}, headers=auth_headers(dispatcher_token))
    assert resp.status_code == 403
