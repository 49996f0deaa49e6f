"""
Vehicles API – fleet units, driver assignment and inspections.
"""
import uuid
from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import or_, select

from fleetfusion.api.deps import DB, VehicleReader, VehicleCreator, VehicleEditor, VehicleRemover
from fleetfusion.api.v1.drivers import get_driver_or_404
from fleetfusion.models.audit import AuditLog
from fleetfusion.models.compliance import ComplianceAlert
from fleetfusion.models.organization import Organization
from fleetfusion.models.vehicle import Vehicle
from fleetfusion.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleOut, VehicleInspectionCreate
from fleetfusion.services.compliance_service import organization_tz

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


# ── Helpers ──────────────────────────────────────────────────────────────────

async def get_vehicle_or_404(db, ctx, vehicle_id: uuid.UUID) -> Vehicle:
    """Other organizations' vehicles answer 404, not 403."""
    result = await db.execute(
        select(Vehicle).where(
            Vehicle.id == vehicle_id,
            Vehicle.organization_id == ctx.organization_id,
        )
    )
    vehicle = result.scalar_one_or_none()
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


async def _ensure_unique_unit_number(db, ctx, unit_number: str, exclude_id: uuid.UUID | None = None):
    query = select(Vehicle.id).where(
        Vehicle.organization_id == ctx.organization_id,
        Vehicle.unit_number == unit_number,
    )
    if exclude_id:
        query = query.where(Vehicle.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Unit number {unit_number} is already in use",
        )


def _as_json(value):
    return str(value) if value is not None and not isinstance(value, (str, int, bool)) else value


async def _write_audit(db, ctx, *, entity_id, action: str,
                       old_values: dict | None = None, new_values: dict | None = None):
    db.add(AuditLog(
        organization_id=ctx.organization_id,
        user_id=ctx.user_id,
        entity_type="vehicle",
        entity_id=entity_id,
        action=action,
        old_values=old_values,
        new_values=new_values,
    ))


# ── Vehicles ─────────────────────────────────────────────────────────────────

@router.get("", response_model=list[VehicleOut])
async def list_vehicles(
    ctx: VehicleReader,
    db: DB,
    status: str | None = None,
    type: str | None = None,
    search: str | None = None,
    assigned_driver_id: uuid.UUID | None = None,
    maintenance_due: bool = False,
):
    """
    ``search`` matches unit number, VIN, make, model and plate.
    ``maintenance_due`` keeps vehicles whose next maintenance or inspection
    date has been reached in the organization's time zone.
    """
    query = select(Vehicle).where(Vehicle.organization_id == ctx.organization_id)
    if status:
        query = query.where(Vehicle.status == status)
    if type:
        query = query.where(Vehicle.type == type)
    if assigned_driver_id:
        query = query.where(Vehicle.current_driver_id == assigned_driver_id)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Vehicle.unit_number.ilike(pattern),
            Vehicle.vin.ilike(pattern),
            Vehicle.make.ilike(pattern),
            Vehicle.model.ilike(pattern),
            Vehicle.license_plate.ilike(pattern),
        ))
    if maintenance_due:
        organization = await db.get(Organization, ctx.organization_id)
        today = datetime.now(organization_tz(organization)).date()
        query = query.where(or_(
            Vehicle.next_maintenance_date <= today,
            Vehicle.next_inspection_due <= today,
        ))
    result = await db.execute(query.order_by(Vehicle.unit_number))
    return result.scalars().all()


@router.post("", response_model=VehicleOut, status_code=status.HTTP_201_CREATED)
async def create_vehicle(payload: VehicleCreate, ctx: VehicleCreator, db: DB):
    await _ensure_unique_unit_number(db, ctx, payload.unit_number)
    if payload.current_driver_id:
        await get_driver_or_404(db, ctx, payload.current_driver_id)

    vehicle = Vehicle(organization_id=ctx.organization_id, **payload.model_dump())
    db.add(vehicle)
    await db.flush()

    await _write_audit(
        db, ctx, entity_id=vehicle.id, action="create",
        new_values=payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(vehicle)
    return vehicle


@router.get("/{vehicle_id}", response_model=VehicleOut)
async def get_vehicle(vehicle_id: uuid.UUID, ctx: VehicleReader, db: DB):
    return await get_vehicle_or_404(db, ctx, vehicle_id)


@router.put("/{vehicle_id}", response_model=VehicleOut)
async def update_vehicle(vehicle_id: uuid.UUID, payload: VehicleUpdate, ctx: VehicleEditor, db: DB):
    vehicle = await get_vehicle_or_404(db, ctx, vehicle_id)
    updates = payload.model_dump(exclude_unset=True)

    if updates.get("unit_number"):
        await _ensure_unique_unit_number(db, ctx, updates["unit_number"], exclude_id=vehicle.id)
    if updates.get("current_driver_id"):
        await get_driver_or_404(db, ctx, updates["current_driver_id"])

    old_values = {k: _as_json(getattr(vehicle, k)) for k in updates}
    for field, value in updates.items():
        setattr(vehicle, field, value)

    await _write_audit(
        db, ctx, entity_id=vehicle.id, action="update",
        old_values=old_values,
        new_values=payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(vehicle)
    return vehicle


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def retire_vehicle(vehicle_id: uuid.UUID, ctx: VehicleRemover, db: DB):
    """Soft delete: documents and alerts keep pointing at the unit, so the row stays as retired."""
    vehicle = await get_vehicle_or_404(db, ctx, vehicle_id)
    old_values = {"status": vehicle.status, "current_driver_id": _as_json(vehicle.current_driver_id)}
    vehicle.status = "retired"
    vehicle.current_driver_id = None
    await _write_audit(
        db, ctx, entity_id=vehicle.id, action="delete",
        old_values=old_values, new_values={"status": "retired", "current_driver_id": None},
    )
    await db.commit()


# ── Inspections ──────────────────────────────────────────────────────────────

@router.post("/{vehicle_id}/inspections", response_model=VehicleOut)
async def record_inspection(
    vehicle_id: uuid.UUID, payload: VehicleInspectionCreate, ctx: VehicleEditor, db: DB
):
    """
    Records a completed inspection. The next due date is replaced by the one
    given here, or cleared, and an informational alert is raised.
    """
    vehicle = await get_vehicle_or_404(db, ctx, vehicle_id)
    old_values = {
        "last_inspection_date": _as_json(vehicle.last_inspection_date),
        "next_inspection_due": _as_json(vehicle.next_inspection_due),
    }
    vehicle.last_inspection_date = payload.inspection_date
    vehicle.next_inspection_due = payload.next_inspection_due

    message = f"{vehicle.display_name} inspected on {payload.inspection_date.isoformat()}"
    if payload.inspector:
        message += f" by {payload.inspector}"
    db.add(ComplianceAlert(
        organization_id=ctx.organization_id,
        vehicle_id=vehicle.id,
        type="inspection_due",
        severity="low",
        title="Inspection Completed",
        message=message,
        entity_type="vehicle",
        entity_id=vehicle.id,
        due_date=payload.next_inspection_due,
    ))
    await _write_audit(
        db, ctx, entity_id=vehicle.id, action="inspect",
        old_values=old_values,
        new_values=payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(vehicle)
    return vehicle
