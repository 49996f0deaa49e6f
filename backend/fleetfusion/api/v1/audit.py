"""
Audit API – read access to the organization's change history.
"""
import math
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Query
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from fleetfusion.api.deps import DB, AuditReader
from fleetfusion.models.audit import AuditLog
from fleetfusion.schemas.audit import AuditLogOut, AuditLogPage

router = APIRouter(prefix="/audit-logs", tags=["audit"])


def _utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)


@router.get("", response_model=AuditLogPage)
async def list_audit_logs(
    ctx: AuditReader,
    db: DB,
    user_id: uuid.UUID | None = None,
    entity_type: str | None = None,
    entity_id: uuid.UUID | None = None,
    action: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
):
    """Newest first. ``start`` and ``end`` bound ``created_at`` inclusively."""
    conditions = [AuditLog.organization_id == ctx.organization_id]
    if user_id:
        conditions.append(AuditLog.user_id == user_id)
    if entity_type:
        conditions.append(AuditLog.entity_type == entity_type)
    if entity_id:
        conditions.append(AuditLog.entity_id == entity_id)
    if action:
        conditions.append(AuditLog.action == action)
    if start:
        conditions.append(AuditLog.created_at >= _utc(start))
    if end:
        conditions.append(AuditLog.created_at <= _utc(end))

    total = (await db.execute(select(func.count()).select_from(AuditLog).where(*conditions))).scalar_one()
    result = await db.execute(
        select(AuditLog)
        .options(selectinload(AuditLog.user))
        .where(*conditions)
        .order_by(AuditLog.created_at.desc(), AuditLog.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return AuditLogPage(
        items=[AuditLogOut.model_validate(row) for row in result.scalars().all()],
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit),
    )
