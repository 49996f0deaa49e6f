"""
Celery tasks for periodic compliance checks.

Each organization is processed in its own session and transaction, so one
failing tenant does not hold back the others.
"""
import asyncio
import logging
from datetime import date, datetime, timezone

from sqlalchemy import select

from fleetfusion.core.config import settings
from fleetfusion.core.database import AsyncSessionLocal
from fleetfusion.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="fleetfusion.tasks.compliance_tasks.run_hos_sweeps")
def run_hos_sweeps():
    """Runs the HOS sweep for every active organization."""
    return asyncio.run(sweep_all_organizations(datetime.now(timezone.utc)))


@celery_app.task(name="fleetfusion.tasks.compliance_tasks.check_expiring_documents")
def check_expiring_documents():
    """Creates expiring-document alerts for every active organization."""
    return asyncio.run(
        check_documents_all_organizations(None, settings.EXPIRING_DOCUMENT_DAYS)
    )


async def _active_organization_ids(session_factory) -> list:
    from fleetfusion.models.organization import Organization

    async with session_factory() as db:
        result = await db.execute(select(Organization.id).where(Organization.is_active == True))  # noqa: E712
        return list(result.scalars().all())


async def sweep_all_organizations(now: datetime, session_factory=AsyncSessionLocal) -> dict:
    from fleetfusion.models.organization import Organization
    from fleetfusion.services.compliance_service import ComplianceService

    totals = {"organizations": 0, "checked": 0, "violations": 0, "failed": 0}
    for org_id in await _active_organization_ids(session_factory):
        async with session_factory() as db:
            try:
                organization = await db.get(Organization, org_id)
                sweep = await ComplianceService(db).run_hos_sweep(organization, now)
                await db.commit()
            except Exception:
                logger.exception("HOS sweep failed for organization %s", org_id)
                await db.rollback()
                totals["failed"] += 1
                continue
        totals["organizations"] += 1
        totals["checked"] += sweep.checked
        totals["violations"] += sweep.violations

    logger.info("HOS sweep finished: %s", totals)
    return totals


async def check_documents_all_organizations(
    today: date | None, days: int, session_factory=AsyncSessionLocal
) -> dict:
    """``today=None`` uses each organization's local date."""
    from fleetfusion.models.organization import Organization
    from fleetfusion.services.compliance_service import ComplianceService, organization_tz

    totals = {"organizations": 0, "expiring": 0, "failed": 0}
    for org_id in await _active_organization_ids(session_factory):
        async with session_factory() as db:
            try:
                as_of = today
                if as_of is None:
                    organization = await db.get(Organization, org_id)
                    as_of = datetime.now(organization_tz(organization)).date()
                count = await ComplianceService(db).check_expiring_documents(org_id, days, as_of)
                await db.commit()
            except Exception:
                logger.exception("Expiring-document check failed for organization %s", org_id)
                await db.rollback()
                totals["failed"] += 1
                continue
        totals["organizations"] += 1
        totals["expiring"] += count

    logger.info("Expiring-document check finished: %s", totals)
    return totals
