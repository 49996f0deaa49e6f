"""
Identity-provider sync: applies webhook events to the local organizations
and users tables.

Rows are never deleted: deleted users and organizations are deactivated so
that HOS logs and audit history keep their owners.
"""
import logging
import re
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetfusion.core.permissions import ROLES, DEFAULT_ROLE
from fleetfusion.models.organization import Organization
from fleetfusion.models.user import User

logger = logging.getLogger(__name__)

PROCESSED = "processed"
SKIPPED = "skipped"
IGNORED = "ignored"

MEMBERSHIP_EVENTS = {
    "organizationMembership.created",
    "organizationMembership.updated",
    "organizationMembership.deleted",
}
SESSION_EVENTS = {"session.created", "session.ended", "session.pending", "session.removed", "session.revoked"}

# Organization fields copied from public_metadata (camelCase on the provider side)
_ORG_METADATA_FIELDS = {
    "dotNumber": "dot_number",
    "mcNumber": "mc_number",
    "address": "address",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "phone": "phone",
    "billingEmail": "billing_email",
}


def generate_slug(name: str | None) -> str:
    if not name or not isinstance(name, str):
        return "org"
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")[:50]
    return slug or "org"


def normalize_role(role: Any) -> str:
    # Provider membership roles may come prefixed, e.g. "org:admin"
    if isinstance(role, str):
        role = role.split(":")[-1]
    return role if role in ROLES else DEFAULT_ROLE


def _primary_email(data: dict) -> str:
    addresses = data.get("email_addresses") or []
    if addresses:
        return addresses[0].get("email_address") or ""
    return ""


class IdentitySyncService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def handle_event(self, event_type: str, data: dict[str, Any]) -> str:
        """Applies one event and returns processed | skipped | ignored. The caller commits."""
        if event_type in ("user.created", "user.updated"):
            return await self._upsert_user(event_type, data)
        if event_type == "user.deleted":
            return await self._deactivate_user(data.get("id"), event_type)
        if event_type in ("organization.created", "organization.updated"):
            return await self._upsert_organization(data)
        if event_type == "organization.deleted":
            return await self._deactivate_organization(data)
        if event_type in MEMBERSHIP_EVENTS:
            return await self._sync_membership(event_type, data)
        if event_type in SESSION_EVENTS:
            logger.info("Session event %s: %s", event_type, data.get("id"))
            return PROCESSED

        logger.warning("Unhandled identity event type: %s", event_type)
        return IGNORED

    # ── Lookups ──────────────────────────────────────────────────────────────

    async def _organization(self, external_id: str) -> Organization | None:
        result = await self.db.execute(
            select(Organization).where(Organization.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def _user(self, external_id: str) -> User | None:
        result = await self.db.execute(select(User).where(User.external_id == external_id))
        return result.scalar_one_or_none()

    # ── Users ────────────────────────────────────────────────────────────────

    async def _upsert_user(self, event_type: str, data: dict) -> str:
        user_id = data.get("id")
        metadata = data.get("public_metadata") or {}
        if not user_id:
            logger.warning("Skipping %s: payload has no user id", event_type)
            return SKIPPED
        if not metadata.get("onboardingComplete"):
            logger.info("Skipping %s for %s: onboarding not complete", event_type, user_id)
            return SKIPPED

        memberships = data.get("organization_memberships") or []
        membership = memberships[0] if memberships else {}
        org_external_id = metadata.get("organizationId") or (membership.get("organization") or {}).get("id")
        if not org_external_id:
            logger.warning("Skipping %s for %s: organization id missing", event_type, user_id)
            return SKIPPED

        organization = await self._organization(org_external_id)
        if organization is None:
            logger.warning(
                "Skipping %s for %s: organization %s not found", event_type, user_id, org_external_id
            )
            return SKIPPED

        role = normalize_role(membership.get("role") or metadata.get("role"))
        user = await self._user(user_id)
        if user is None:
            user = User(external_id=user_id, organization_id=organization.id, email="")
            self.db.add(user)

        user.organization_id = organization.id
        user.email = _primary_email(data) or user.email
        user.first_name = data.get("first_name") or user.first_name
        user.last_name = data.get("last_name") or user.last_name
        user.profile_image_url = data.get("profile_image_url") or user.profile_image_url
        user.role = role
        user.is_active = True
        user.onboarding_complete = True

        logger.info("User %s: %s in organization %s (%s)", event_type, user_id, org_external_id, role)
        return PROCESSED

    async def _deactivate_user(self, external_id: str | None, event_type: str) -> str:
        user = await self._user(external_id) if external_id else None
        if user is None:
            logger.warning("Skipping %s for %s: user not found", event_type, external_id)
            return SKIPPED
        user.is_active = False
        logger.info("User deactivated (%s): %s", event_type, external_id)
        return PROCESSED

    # ── Organizations ────────────────────────────────────────────────────────

    async def _upsert_organization(self, data: dict) -> str:
        org_id = data.get("id")
        if not org_id:
            logger.warning("Skipping organization event: payload has no id")
            return SKIPPED

        name = data.get("name") or data.get("slug") or f"Organization {org_id[:8]}"
        slug = data.get("slug") or generate_slug(name)
        metadata = data.get("public_metadata") or {}

        organization = await self._organization(org_id)
        if organization is None:
            organization = Organization(external_id=org_id, name=name, slug=slug)
            self.db.add(organization)

        organization.name = name
        organization.slug = slug
        for source, target in _ORG_METADATA_FIELDS.items():
            setattr(organization, target, metadata.get(source) or None)
        organization.max_users = metadata.get("maxUsers") or 5
        if metadata.get("subscriptionTier"):
            organization.subscription_tier = metadata["subscriptionTier"]
        if metadata.get("subscriptionStatus"):
            organization.subscription_status = metadata["subscriptionStatus"]
        tz = (metadata.get("settings") or {}).get("timezone")
        if tz:
            organization.timezone = tz
        organization.is_active = True

        logger.info("Organization synced: %s (%s)", org_id, name)
        return PROCESSED

    async def _deactivate_organization(self, data: dict) -> str:
        org_id = data.get("id")
        organization = await self._organization(org_id) if org_id else None
        if organization is None:
            logger.warning("Skipping organization.deleted for %s: not found", org_id)
            return SKIPPED
        organization.is_active = False
        logger.info("Organization deactivated: %s", org_id)
        return PROCESSED

    # ── Memberships ──────────────────────────────────────────────────────────

    async def _sync_membership(self, event_type: str, data: dict) -> str:
        public_user = data.get("public_user_data") or {}
        user_id = data.get("user_id") or public_user.get("user_id")
        org_external_id = (data.get("organization") or {}).get("id")
        if not user_id or not org_external_id:
            logger.warning("Skipping %s: user or organization id missing", event_type)
            return SKIPPED

        if event_type == "organizationMembership.deleted":
            return await self._deactivate_user(user_id, event_type)

        organization = await self._organization(org_external_id)
        if organization is None:
            logger.warning("Skipping %s for %s: organization %s not found", event_type, user_id, org_external_id)
            return SKIPPED

        user = await self._user(user_id)
        if user is None:
            user = User(
                external_id=user_id,
                organization_id=organization.id,
                email=public_user.get("identifier") or f"user-{user_id}@placeholder.com",
            )
            self.db.add(user)

        user.organization_id = organization.id
        user.first_name = public_user.get("first_name") or user.first_name
        user.last_name = public_user.get("last_name") or user.last_name
        user.profile_image_url = public_user.get("profile_image_url") or user.profile_image_url
        if data.get("role"):
            user.role = normalize_role(data["role"])
        user.is_active = True

        logger.info("Membership %s: %s in organization %s", event_type, user_id, org_external_id)
        return PROCESSED
