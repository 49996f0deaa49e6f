"""
Compliance API – HOS violation sweeps, compliance documents and alerts.
"""
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from fleetfusion.api.deps import (
    DB,
    ComplianceReader,
    ComplianceEditor,
    ComplianceManager,
    DocumentReader,
    DocumentCreator,
    DocumentEditor,
    DocumentRemover,
)
from fleetfusion.api.v1.drivers import get_driver_or_404
from fleetfusion.api.v1.vehicles import get_vehicle_or_404
from fleetfusion.core.config import settings
from fleetfusion.models.audit import AuditLog
from fleetfusion.models.compliance import ComplianceAlert, ComplianceDocument
from fleetfusion.models.driver import Driver
from fleetfusion.models.hos import HosViolation
from fleetfusion.models.organization import Organization
from fleetfusion.schemas.compliance import (
    ComplianceAlertOut,
    ComplianceDocumentCreate,
    ComplianceDocumentOut,
    ComplianceDocumentUpdate,
    HosViolationRecordOut,
    ViolationResolve,
)
from fleetfusion.services.compliance_service import ComplianceService, organization_tz

router = APIRouter(prefix="/compliance", tags=["compliance"])


async def _write_audit(db, ctx, *, entity_type: str, entity_id, action: str,
                       old_values: dict | None = None, new_values: dict | None = None):
    db.add(AuditLog(
        organization_id=ctx.organization_id,
        user_id=ctx.user_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        old_values=old_values,
        new_values=new_values,
    ))


# ── HOS violations ───────────────────────────────────────────────────────────

@router.post("/hos/run", response_model=dict)
async def run_hos_check(ctx: ComplianceManager, db: DB):
    """
    Computes the HOS status of every active driver in the organization and
    materializes new violations (one alert each). Repeated runs on the same day
    do not duplicate open violations.
    """
    organization = await db.get(Organization, ctx.organization_id)
    sweep = await ComplianceService(db).run_hos_sweep(organization, datetime.now(timezone.utc))
    await db.commit()
    return {"checked": sweep.checked, "violations": sweep.violations}


@router.get("/violations", response_model=list[HosViolationRecordOut])
async def list_violations(
    ctx: ComplianceReader,
    db: DB,
    status: str | None = None,
    driver_id: uuid.UUID | None = None,
):
    conditions = [HosViolation.organization_id == ctx.organization_id]
    if status:
        conditions.append(HosViolation.status == status)
    if driver_id:
        conditions.append(HosViolation.driver_id == driver_id)

    result = await db.execute(
        select(HosViolation, Driver.first_name, Driver.last_name)
        .join(Driver, Driver.id == HosViolation.driver_id)
        .where(*conditions)
        .order_by(HosViolation.occurred_at.desc())
    )

    out = []
    for violation, first_name, last_name in result.all():
        item = HosViolationRecordOut.model_validate(violation)
        item.driver_name = f"{first_name} {last_name}"
        out.append(item)
    return out


@router.post("/violations/{violation_id}/resolve", response_model=HosViolationRecordOut)
async def resolve_violation(violation_id: uuid.UUID, payload: ViolationResolve, ctx: ComplianceEditor, db: DB):
    result = await db.execute(
        select(HosViolation).where(
            HosViolation.id == violation_id,
            HosViolation.organization_id == ctx.organization_id,
        )
    )
    violation = result.scalar_one_or_none()
    if not violation:
        raise HTTPException(status_code=404, detail="Violation not found")
    if violation.status == "resolved":
        raise HTTPException(status_code=400, detail="Violation is already resolved")

    violation.status = "resolved"
    violation.resolved_at = datetime.now(timezone.utc)
    violation.resolved_by = ctx.user_id
    violation.resolution_note = payload.resolution_note

    await _write_audit(
        db, ctx, entity_type="hos_violation", entity_id=violation.id, action="resolve",
        old_values={"status": "open"},
        new_values={"status": "resolved", "resolution_note": payload.resolution_note},
    )
    await db.commit()
    await db.refresh(violation)
    return violation


# ── Documents ────────────────────────────────────────────────────────────────

async def _get_document_or_404(db, ctx, document_id: uuid.UUID) -> ComplianceDocument:
    result = await db.execute(
        select(ComplianceDocument).where(
            ComplianceDocument.id == document_id,
            ComplianceDocument.organization_id == ctx.organization_id,
        )
    )
    document = result.scalar_one_or_none()
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.get("/documents", response_model=list[ComplianceDocumentOut])
async def list_documents(
    ctx: DocumentReader, db: DB, driver_id: uuid.UUID | None = None, vehicle_id: uuid.UUID | None = None
):
    query = select(ComplianceDocument).where(ComplianceDocument.organization_id == ctx.organization_id)
    if driver_id:
        query = query.where(ComplianceDocument.driver_id == driver_id)
    if vehicle_id:
        query = query.where(ComplianceDocument.vehicle_id == vehicle_id)
    result = await db.execute(query.order_by(ComplianceDocument.expiration_date.nulls_last()))
    return result.scalars().all()


@router.post("/documents", response_model=ComplianceDocumentOut, status_code=status.HTTP_201_CREATED)
async def create_document(payload: ComplianceDocumentCreate, ctx: DocumentCreator, db: DB):
    if payload.driver_id:
        await get_driver_or_404(db, ctx, payload.driver_id)
    if payload.vehicle_id:
        await get_vehicle_or_404(db, ctx, payload.vehicle_id)

    document = ComplianceDocument(organization_id=ctx.organization_id, **payload.model_dump())
    db.add(document)
    await db.flush()
    await _write_audit(
        db, ctx, entity_type="document", entity_id=document.id, action="create",
        new_values=payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(document)
    return document


@router.put("/documents/{document_id}", response_model=ComplianceDocumentOut)
async def update_document(
    document_id: uuid.UUID, payload: ComplianceDocumentUpdate, ctx: DocumentEditor, db: DB
):
    document = await _get_document_or_404(db, ctx, document_id)
    updates = payload.model_dump(exclude_unset=True)
    for field, value in updates.items():
        setattr(document, field, value)

    await _write_audit(
        db, ctx, entity_type="document", entity_id=document.id, action="update",
        new_values=payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(document)
    return document


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: uuid.UUID, ctx: DocumentRemover, db: DB):
    document = await _get_document_or_404(db, ctx, document_id)
    await _write_audit(
        db, ctx, entity_type="document", entity_id=document.id, action="delete",
        old_values={"title": document.title, "type": document.type},
    )
    await db.delete(document)
    await db.commit()


@router.post("/documents/check-expiring", response_model=dict)
async def check_expiring_documents(
    ctx: ComplianceEditor,
    db: DB,
    days: int = settings.EXPIRING_DOCUMENT_DAYS,
):
    """
    Creates an alert for each active document expiring within ``days`` days,
    counted from today's date in the organization's time zone.
    """
    organization = await db.get(Organization, ctx.organization_id)
    today = datetime.now(organization_tz(organization)).date()
    try:
        count = await ComplianceService(db).check_expiring_documents(ctx.organization_id, days, today)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    await db.commit()
    return {"expiring": count, "days": days, "as_of": today.isoformat()}


# ── Alerts ───────────────────────────────────────────────────────────────────

@router.get("/alerts", response_model=list[ComplianceAlertOut])
async def list_alerts(ctx: ComplianceReader, db: DB, unacknowledged_only: bool = False):
    query = select(ComplianceAlert).where(ComplianceAlert.organization_id == ctx.organization_id)
    if unacknowledged_only:
        query = query.where(ComplianceAlert.is_acknowledged == False)  # noqa: E712
    result = await db.execute(query.order_by(ComplianceAlert.created_at.desc()))
    return result.scalars().all()


@router.post("/alerts/{alert_id}/acknowledge", response_model=ComplianceAlertOut)
async def acknowledge_alert(alert_id: uuid.UUID, ctx: ComplianceEditor, db: DB):
    result = await db.execute(
        select(ComplianceAlert).where(
            ComplianceAlert.id == alert_id,
            ComplianceAlert.organization_id == ctx.organization_id,
        )
    )
    alert = result.scalar_one_or_none()
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")

    if not alert.is_acknowledged:
        alert.is_acknowledged = True
        alert.acknowledged_by = ctx.user_id
        alert.acknowledged_at = datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(alert)
    return alert
