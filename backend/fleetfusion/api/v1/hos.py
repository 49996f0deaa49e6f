"""
HOS API – duty-status logs and the computed HOS status of a driver.
"""
import uuid
from datetime import date, datetime, timezone

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from fleetfusion.api.deps import DB, CurrentContext
from fleetfusion.api.v1.drivers import get_driver_or_404
from fleetfusion.core.config import settings
from fleetfusion.core.permissions import can_access_driver, has_resource_permission
from fleetfusion.core.redis import get_redis
from fleetfusion.models.hos import HosLog, DutyStatusEntry
from fleetfusion.models.organization import Organization
from fleetfusion.schemas.hos import (
    DutyStatusEntryCreate, DutyStatusEntryOut, HosLogCreate, HosLogOut, DriverHOSStatusOut,
)
from fleetfusion.services.compliance_service import ComplianceService, organization_tz
from fleetfusion.services.hos_cache import HOSStatusCache

router = APIRouter(tags=["hos"])


# ── Helpers ──────────────────────────────────────────────────────────────────

def _can_write_logs(ctx, driver_id: uuid.UUID) -> bool:
    # Drivers may record their own duty status without the broader hos_log grant
    if has_resource_permission(ctx, "create", "hos_log"):
        return True
    return ctx.role == "driver" and ctx.driver_id == driver_id


async def _status_cache() -> HOSStatusCache | None:
    if not settings.HOS_CACHE_ENABLED:
        return None
    return HOSStatusCache(await get_redis(), settings.HOS_CACHE_TTL_SECONDS)


async def _invalidate_status(organization_id: uuid.UUID, driver_id: uuid.UUID) -> None:
    cache = await _status_cache()
    if cache is not None:
        await cache.invalidate(organization_id, driver_id)


async def _load_log(db, log_id: uuid.UUID) -> HosLog:
    result = await db.execute(
        select(HosLog)
        .options(selectinload(HosLog.entries))
        .where(HosLog.id == log_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


def _entry(payload: DutyStatusEntryCreate) -> DutyStatusEntry:
    return DutyStatusEntry(
        status=payload.status.value,
        start_time=payload.start_time,
        end_time=payload.end_time,
        location=payload.location,
        remarks=payload.remarks,
    )


# ── Logs ─────────────────────────────────────────────────────────────────────

@router.get("/drivers/{driver_id}/hos-logs", response_model=list[HosLogOut])
async def list_hos_logs(
    driver_id: uuid.UUID,
    ctx: CurrentContext,
    db: DB,
    from_date: date | None = None,
    to_date: date | None = None,
):
    driver = await get_driver_or_404(db, ctx, driver_id)
    if not can_access_driver(ctx, driver.id):
        raise HTTPException(status_code=403, detail="Access denied")

    conditions = [HosLog.driver_id == driver.id, HosLog.organization_id == ctx.organization_id]
    if from_date:
        conditions.append(HosLog.log_date >= from_date)
    if to_date:
        conditions.append(HosLog.log_date <= to_date)

    result = await db.execute(
        select(HosLog)
        .options(selectinload(HosLog.entries))
        .where(*conditions)
        .order_by(HosLog.log_date.desc())
    )
    return result.scalars().all()


@router.post("/drivers/{driver_id}/hos-logs", response_model=HosLogOut, status_code=status.HTTP_201_CREATED)
async def create_hos_log(driver_id: uuid.UUID, payload: HosLogCreate, ctx: CurrentContext, db: DB):
    driver = await get_driver_or_404(db, ctx, driver_id)
    if not _can_write_logs(ctx, driver.id):
        raise HTTPException(status_code=403, detail="Access denied")

    log = HosLog(
        organization_id=ctx.organization_id,
        driver_id=driver.id,
        log_date=payload.log_date,
        notes=payload.notes,
        created_by=ctx.user_id,
        entries=[_entry(e) for e in payload.entries],
    )
    db.add(log)
    await db.commit()

    await _invalidate_status(ctx.organization_id, driver.id)
    return await _load_log(db, log.id)


@router.post(
    "/hos-logs/{log_id}/entries",
    response_model=DutyStatusEntryOut,
    status_code=status.HTTP_201_CREATED,
)
async def add_duty_status_entry(log_id: uuid.UUID, payload: DutyStatusEntryCreate, ctx: CurrentContext, db: DB):
    """Appends one entry. Entries are never edited or removed through the API."""
    result = await db.execute(
        select(HosLog).where(HosLog.id == log_id, HosLog.organization_id == ctx.organization_id)
    )
    log = result.scalar_one_or_none()
    if not log:
        raise HTTPException(status_code=404, detail="HOS log not found")
    if not _can_write_logs(ctx, log.driver_id):
        raise HTTPException(status_code=403, detail="Access denied")

    entry = _entry(payload)
    entry.log_id = log.id
    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    await _invalidate_status(ctx.organization_id, log.driver_id)
    return entry


# ── Status ───────────────────────────────────────────────────────────────────

@router.get("/drivers/{driver_id}/hos-status", response_model=DriverHOSStatusOut)
async def get_hos_status(driver_id: uuid.UUID, ctx: CurrentContext, db: DB, at: datetime | None = None):
    """
    Current HOS status, or the status as of ``at``. Point-in-time queries are
    never cached; the current status is cached briefly when the cache is enabled.
    """
    driver = await get_driver_or_404(db, ctx, driver_id)
    if not can_access_driver(ctx, driver.id):
        raise HTTPException(status_code=403, detail="Access denied")

    cache = await _status_cache() if at is None else None
    if cache is not None:
        hit = await cache.get(ctx.organization_id, driver.id)
        if hit is not None:
            return DriverHOSStatusOut(**hit, cached=True)

    now = at or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    organization = await db.get(Organization, ctx.organization_id)
    hos_status = await ComplianceService(db).driver_status(driver, now, organization_tz(organization))
    out = DriverHOSStatusOut.model_validate(hos_status)

    if cache is not None:
        await cache.set(ctx.organization_id, driver.id, out.model_dump(mode="json", exclude={"cached"}))
    return out
