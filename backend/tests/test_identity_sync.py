"""
Tests for IdentitySyncService and POST /api/v1/webhooks/identity.
"""
import pytest
from sqlalchemy import select

from fleetfusion.core.config import settings
from fleetfusion.models.organization import Organization
from fleetfusion.models.user import User
from fleetfusion.services.identity_sync import (
    IGNORED,
    PROCESSED,
    SKIPPED,
    IdentitySyncService,
    generate_slug,
    normalize_role,
)

WEBHOOK = "/api/v1/webhooks/identity"


def user_payload(user_id: str, org_external_id: str, *, onboarding: bool = True, role: str | None = "org:dispatcher"):
    return {
        "id": user_id,
        "email_addresses": [{"email_address": f"{user_id}@fleet.dev"}],
        "first_name": "Sam",
        "last_name": "Ortiz",
        "public_metadata": {"onboardingComplete": onboarding, "organizationId": org_external_id},
        "organization_memberships": [{"organization": {"id": org_external_id}, "role": role}],
    }


async def fetch_user(db, external_id: str) -> User | None:
    result = await db.execute(
        select(User).where(User.external_id == external_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def fetch_org(db, external_id: str) -> Organization | None:
    result = await db.execute(
        select(Organization)
        .where(Organization.external_id == external_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


# ── Helpers ───────────────────────────────────────────────────────────────────

def test_generate_slug():
    assert generate_slug("Acme Trucking, Inc.") == "acme-trucking-inc"
    assert generate_slug("  --  ") == "org"
    assert generate_slug(None) == "org"
    assert len(generate_slug("x" * 80)) == 50


def test_normalize_role():
    assert normalize_role("org:admin") == "admin"
    assert normalize_role("dispatcher") == "dispatcher"
    assert normalize_role("org:member") == "viewer"
    assert normalize_role(None) == "viewer"


# ── Organizations ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_organization_created_with_fallbacks(db):
    outcome = await IdentitySyncService(db).handle_event(
        "organization.created",
        {"id": "org_abcdef123456", "public_metadata": {"dotNumber": "123456", "maxUsers": 25}},
    )
    await db.commit()

    assert outcome == PROCESSED
    org = await fetch_org(db, "org_abcdef123456")
    assert org.name == "Organization org_abcd"
    assert org.slug == "organization-org-abcd"
    assert org.dot_number == "123456"
    assert org.max_users == 25
    assert org.is_active


@pytest.mark.asyncio
async def test_organization_updated_in_place(db, organization):
    outcome = await IdentitySyncService(db).handle_event(
        "organization.updated",
        {
            "id": organization.external_id,
            "name": "Renamed Freight",
            "slug": "renamed-freight",
            "public_metadata": {"settings": {"timezone": "America/Chicago"}},
        },
    )
    await db.commit()

    assert outcome == PROCESSED
    org = await fetch_org(db, organization.external_id)
    assert org.id == organization.id
    assert org.name == "Renamed Freight"
    assert org.timezone == "America/Chicago"
    assert org.max_users == 5


@pytest.mark.asyncio
async def test_organization_deleted_is_deactivated_not_removed(db, organization):
    outcome = await IdentitySyncService(db).handle_event("organization.deleted", {"id": organization.external_id})
    await db.commit()

    assert outcome == PROCESSED
    org = await fetch_org(db, organization.external_id)
    assert org is not None
    assert org.is_active is False


@pytest.mark.asyncio
async def test_unknown_organization_deleted_is_skipped(db):
    assert await IdentitySyncService(db).handle_event("organization.deleted", {"id": "org_missing"}) == SKIPPED


# ── Users ─────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_user_created_after_onboarding(db, organization):
    outcome = await IdentitySyncService(db).handle_event(
        "user.created", user_payload("user_new", organization.external_id)
    )
    await db.commit()

    assert outcome == PROCESSED
    user = await fetch_user(db, "user_new")
    assert user.organization_id == organization.id
    assert user.email == "user_new@fleet.dev"
    assert user.role == "dispatcher"
    assert user.onboarding_complete


@pytest.mark.asyncio
async def test_user_without_onboarding_is_skipped(db, organization):
    outcome = await IdentitySyncService(db).handle_event(
        "user.created", user_payload("user_pending", organization.external_id, onboarding=False)
    )
    assert outcome == SKIPPED
    assert await fetch_user(db, "user_pending") is None


@pytest.mark.asyncio
async def test_user_for_unknown_organization_is_skipped(db):
    outcome = await IdentitySyncService(db).handle_event("user.created", user_payload("user_lost", "org_unknown"))
    assert outcome == SKIPPED
    assert await fetch_user(db, "user_lost") is None


@pytest.mark.asyncio
async def test_user_with_unknown_role_becomes_viewer(db, organization):
    await IdentitySyncService(db).handle_event(
        "user.created", user_payload("user_odd", organization.external_id, role="org:superhero")
    )
    await db.commit()
    assert (await fetch_user(db, "user_odd")).role == "viewer"


@pytest.mark.asyncio
async def test_user_updated_keeps_row(db, organization, dispatcher_user):
    payload = user_payload(dispatcher_user.external_id, organization.external_id, role="org:admin")
    payload["first_name"] = "Samantha"
    await IdentitySyncService(db).handle_event("user.updated", payload)
    await db.commit()

    user = await fetch_user(db, dispatcher_user.external_id)
    assert user.id == dispatcher_user.id
    assert user.first_name == "Samantha"
    assert user.role == "admin"


@pytest.mark.asyncio
async def test_user_deleted_is_deactivated(db, viewer_user):
    outcome = await IdentitySyncService(db).handle_event("user.deleted", {"id": viewer_user.external_id})
    await db.commit()

    assert outcome == PROCESSED
    assert (await fetch_user(db, viewer_user.external_id)).is_active is False


# ── Memberships, sessions, unknown events ─────────────────────────────────────

@pytest.mark.asyncio
async def test_membership_created_adds_placeholder_user(db, organization):
    outcome = await IdentitySyncService(db).handle_event(
        "organizationMembership.created",
        {
            "organization": {"id": organization.external_id},
            "public_user_data": {"user_id": "user_member", "first_name": "Ana"},
            "role": "org:driver",
        },
    )
    await db.commit()

    assert outcome == PROCESSED
    user = await fetch_user(db, "user_member")
    assert user.email == "user-user_member@placeholder.com"
    assert user.role == "driver"
    assert user.is_active


@pytest.mark.asyncio
async def test_membership_deleted_deactivates_user(db, organization, viewer_user):
    outcome = await IdentitySyncService(db).handle_event(
        "organizationMembership.deleted",
        {"organization": {"id": organization.external_id}, "public_user_data": {"user_id": viewer_user.external_id}},
    )
    await db.commit()

    assert outcome == PROCESSED
    assert (await fetch_user(db, viewer_user.external_id)).is_active is False


@pytest.mark.asyncio
async def test_session_events_are_processed_without_changes(db):
    assert await IdentitySyncService(db).handle_event("session.created", {"id": "sess_1"}) == PROCESSED


@pytest.mark.asyncio
async def test_unknown_event_is_ignored(db):
    assert await IdentitySyncService(db).handle_event("email.created", {}) == IGNORED


# ── Webhook endpoint ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_webhook_applies_event(client, db, organization):
    resp = await client.post(WEBHOOK, json={
        "type": "user.created",
        "data": user_payload("user_hook", organization.external_id),
    })
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "type": "user.created", "outcome": "processed"}
    assert await fetch_user(db, "user_hook") is not None


@pytest.mark.asyncio
async def test_webhook_requires_secret_when_configured(client, organization, monkeypatch):
    monkeypatch.setattr(settings, "IDENTITY_WEBHOOK_SECRET", "s3cret")
    body = {"type": "organization.updated", "data": {"id": organization.external_id, "name": "X"}}

    resp = await client.post(WEBHOOK, json=body)
    assert resp.status_code == 401

    resp = await client.post(WEBHOOK, json=body, headers={"X-Webhook-Secret": "wrong"})
    assert resp.status_code == 401

    resp = await client.post(WEBHOOK, json=body, headers={"X-Webhook-Secret": "s3cret"})
    assert resp.status_code == 200
    assert resp.json()["outcome"] == "processed"
