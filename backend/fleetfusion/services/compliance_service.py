"""
Compliance service: HOS status for stored logs, violation materialization,
expiring-document alerts.
"""
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fleetfusion.core.config import settings
from fleetfusion.services.hos_service import (
    DriverHOSStatus,
    HOSConfig,
    DEFAULT_HOS_CONFIG,
    calculate_hos_status,
    start_of_day,
)

if TYPE_CHECKING:
    from fleetfusion.models.driver import Driver
    from fleetfusion.models.hos import HosLog, HosViolation
    from fleetfusion.models.organization import Organization

logger = logging.getLogger(__name__)

# Logs older than the cycle window plus one day cannot affect today's status
LOOKBACK_DAYS = 8


def organization_tz(organization: "Organization | None") -> ZoneInfo:
    name = (organization.timezone if organization else None) or settings.DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown organization time zone %r, falling back to UTC", name)
        return ZoneInfo("UTC")


@dataclass
class SweepResult:
    checked: int = 0
    violations: int = 0


class ComplianceService:

    def __init__(self, db: AsyncSession, config: HOSConfig = DEFAULT_HOS_CONFIG):
        self.db = db
        self.config = config

    # ── HOS ──────────────────────────────────────────────────────────────────

    async def get_driver_logs(self, driver_id: uuid.UUID, since: date) -> list["HosLog"]:
        from fleetfusion.models.hos import HosLog

        result = await self.db.execute(
            select(HosLog)
            .options(selectinload(HosLog.entries))
            .where(HosLog.driver_id == driver_id, HosLog.log_date >= since)
            .order_by(HosLog.log_date)
        )
        return list(result.scalars().all())

    async def last_logged_before(self, driver_id: uuid.UUID, now: datetime) -> datetime | None:
        """End of the driver's latest entry that finished before ``now``, across all history."""
        from fleetfusion.models.hos import DutyStatusEntry, HosLog

        result = await self.db.execute(
            select(func.max(DutyStatusEntry.end_time))
            .join(HosLog, DutyStatusEntry.log_id == HosLog.id)
            .where(HosLog.driver_id == driver_id, DutyStatusEntry.end_time <= now.astimezone(timezone.utc))
        )
        return result.scalar_one_or_none()

    async def driver_status(
        self, driver: "Driver", now: datetime, tz: ZoneInfo | None = None
    ) -> DriverHOSStatus:
        """
        Status as of ``now``; entries logged after ``now`` do not count. A driver
        with history but nothing inside the lookback has been off duty for
        longer than any restart period and is reported compliant.
        """
        tz = tz or ZoneInfo("UTC")
        since = (now.astimezone(tz) - timedelta(days=LOOKBACK_DAYS)).date()
        logs = await self.get_driver_logs(driver.id, since)
        config = replace(self.config, truncate_at_now=True)
        status = calculate_hos_status(driver.id, logs, now, tz=tz, config=config)

        if status.compliance_status == "pending":
            last_logged = await self.last_logged_before(driver.id, now)
            if last_logged is not None:
                status = replace(
                    status,
                    compliance_status="compliant",
                    restart_available=True,
                    last_logged_at=last_logged if last_logged.tzinfo else last_logged.replace(tzinfo=timezone.utc),
                )
        return status

    async def record_violations(
        self,
        driver: "Driver",
        status: DriverHOSStatus,
        tz: ZoneInfo | None = None,
    ) -> list["HosViolation"]:
        """
        Persists computed violations with one alert each. A type that already
        has an open violation for this driver since the start of the day is
        not recorded again. The caller commits.
        """
        from fleetfusion.models.compliance import ComplianceAlert
        from fleetfusion.models.hos import HosViolation

        if not status.violations:
            return []

        day_start = start_of_day(status.evaluated_at, tz)
        existing = await self.db.execute(
            select(HosViolation.type).where(
                HosViolation.driver_id == driver.id,
                HosViolation.status == "open",
                HosViolation.occurred_at >= day_start.astimezone(timezone.utc),
            )
        )
        open_types = set(existing.scalars().all())

        created = []
        for v in status.violations:
            if v.type in open_types:
                continue
            row = HosViolation(
                organization_id=driver.organization_id,
                driver_id=driver.id,
                type=v.type,
                description=v.description,
                severity=v.severity,
                status="open",
                occurred_at=v.timestamp.astimezone(timezone.utc),
            )
            self.db.add(row)
            self.db.add(ComplianceAlert(
                organization_id=driver.organization_id,
                driver_id=driver.id,
                type="hos_violation",
                severity="high",
                title="HOS Violation Detected",
                message=f"{driver.full_name}: {v.description}",
                entity_type="driver",
                entity_id=driver.id,
                due_date=v.timestamp.astimezone(tz or timezone.utc).date(),
            ))
            created.append(row)
            open_types.add(v.type)

        if created:
            logger.info(
                "Recorded %d HOS violation(s) for driver %s: %s",
                len(created), driver.id, ", ".join(r.type for r in created),
            )
        return created

    async def run_hos_sweep(self, organization: "Organization", now: datetime) -> SweepResult:
        """Computes status for every active driver and records new violations. The caller commits."""
        from fleetfusion.models.driver import Driver

        tz = organization_tz(organization)
        result = await self.db.execute(
            select(Driver).where(
                Driver.organization_id == organization.id,
                Driver.status == "active",
            )
        )
        sweep = SweepResult()
        for driver in result.scalars().all():
            status = await self.driver_status(driver, now, tz)
            created = await self.record_violations(driver, status, tz)
            sweep.checked += 1
            sweep.violations += len(created)

        logger.info(
            "HOS sweep for organization %s: %d driver(s) checked, %d new violation(s)",
            organization.id, sweep.checked, sweep.violations,
        )
        return sweep

    # ── Documents ────────────────────────────────────────────────────────────

    async def check_expiring_documents(
        self, organization_id: uuid.UUID, days: int, today: date
    ) -> int:
        """
        Creates an alert for each active document expiring within ``days``
        and marks documents that are already past expiry as expired.
        Returns the number of expiring documents. The caller commits.
        """
        from fleetfusion.models.compliance import ComplianceAlert, ComplianceDocument

        if not isinstance(days, int) or isinstance(days, bool) or days <= 0:
            raise ValueError("days must be a positive integer")

        expired_result = await self.db.execute(
            select(ComplianceDocument).where(
                ComplianceDocument.organization_id == organization_id,
                ComplianceDocument.status == "active",
                ComplianceDocument.expiration_date < today,
            )
        )
        for doc in expired_result.scalars().all():
            doc.status = "expired"

        cutoff = today + timedelta(days=days)
        result = await self.db.execute(
            select(ComplianceDocument).where(
                ComplianceDocument.organization_id == organization_id,
                ComplianceDocument.status == "active",
                ComplianceDocument.expiration_date >= today,
                ComplianceDocument.expiration_date <= cutoff,
            )
        )
        docs = result.scalars().all()

        for doc in docs:
            if doc.driver_id:
                entity_type, entity_id = "driver", doc.driver_id
            elif doc.vehicle_id:
                entity_type, entity_id = "vehicle", doc.vehicle_id
            else:
                entity_type, entity_id = "company", organization_id
            self.db.add(ComplianceAlert(
                organization_id=organization_id,
                driver_id=doc.driver_id,
                vehicle_id=doc.vehicle_id,
                type="expiring_document",
                severity="medium",
                title="Document Expiring Soon",
                message=f"Document {doc.title} expires on {doc.expiration_date.isoformat()}",
                entity_type=entity_type,
                entity_id=entity_id,
                due_date=doc.expiration_date,
            ))

        return len(docs)
