import uuid

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from fleetfusion.api.deps import DB, CurrentContext, DriverReader, DriverCreator, DriverEditor, DriverRemover
from fleetfusion.core.permissions import can_access_driver
from fleetfusion.models.audit import AuditLog
from fleetfusion.models.driver import Driver
from fleetfusion.models.user import User
from fleetfusion.schemas.driver import DriverCreate, DriverUpdate, DriverOut

router = APIRouter(prefix="/drivers", tags=["drivers"])


# ── Helpers ──────────────────────────────────────────────────────────────────

async def get_driver_or_404(db, ctx, driver_id: uuid.UUID) -> Driver:
    """Other organizations' drivers answer 404, not 403."""
    result = await db.execute(
        select(Driver).where(
            Driver.id == driver_id,
            Driver.organization_id == ctx.organization_id,
        )
    )
    driver = result.scalar_one_or_none()
    if not driver:
        raise HTTPException(status_code=404, detail="Driver not found")
    return driver


async def _ensure_unique_employee_id(db, ctx, employee_id: str | None, exclude_id: uuid.UUID | None = None):
    if not employee_id:
        return
    query = select(Driver.id).where(
        Driver.organization_id == ctx.organization_id,
        Driver.employee_id == employee_id,
    )
    if exclude_id:
        query = query.where(Driver.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Employee ID {employee_id} is already in use",
        )


async def _ensure_user_in_organization(db, ctx, user_id: uuid.UUID | None):
    if user_id is None:
        return
    result = await db.execute(
        select(User.id).where(User.id == user_id, User.organization_id == ctx.organization_id)
    )
    if not result.scalar_one_or_none():
        raise HTTPException(status_code=404, detail="User not found")


async def _write_audit(db, *, organization_id, user_id, entity_id, action: str,
                       old_values: dict | None = None, new_values: dict | None = None):
    db.add(AuditLog(
        organization_id=organization_id,
        user_id=user_id,
        entity_type="driver",
        entity_id=entity_id,
        action=action,
        old_values=old_values,
        new_values=new_values,
    ))


# ── Drivers ──────────────────────────────────────────────────────────────────

@router.get("", response_model=list[DriverOut])
async def list_drivers(ctx: DriverReader, db: DB, status: str | None = None):
    query = select(Driver).where(Driver.organization_id == ctx.organization_id)
    if status:
        query = query.where(Driver.status == status)
    result = await db.execute(query.order_by(Driver.last_name, Driver.first_name))
    return result.scalars().all()


@router.post("", response_model=DriverOut, status_code=status.HTTP_201_CREATED)
async def create_driver(payload: DriverCreate, ctx: DriverCreator, db: DB):
    await _ensure_unique_employee_id(db, ctx, payload.employee_id)
    await _ensure_user_in_organization(db, ctx, payload.user_id)

    driver = Driver(organization_id=ctx.organization_id, **payload.model_dump())
    db.add(driver)
    await db.flush()

    await _write_audit(
        db, organization_id=ctx.organization_id, user_id=ctx.user_id,
        entity_id=driver.id, action="create",
        new_values=payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(driver)
    return driver


@router.get("/{driver_id}", response_model=DriverOut)
async def get_driver(driver_id: uuid.UUID, ctx: CurrentContext, db: DB):
    driver = await get_driver_or_404(db, ctx, driver_id)
    if not can_access_driver(ctx, driver.id):
        raise HTTPException(status_code=403, detail="Access denied")
    return driver


@router.put("/{driver_id}", response_model=DriverOut)
async def update_driver(driver_id: uuid.UUID, payload: DriverUpdate, ctx: DriverEditor, db: DB):
    driver = await get_driver_or_404(db, ctx, driver_id)
    updates = payload.model_dump(exclude_unset=True)

    if "employee_id" in updates:
        await _ensure_unique_employee_id(db, ctx, updates["employee_id"], exclude_id=driver.id)
    if "user_id" in updates:
        await _ensure_user_in_organization(db, ctx, updates["user_id"])

    old_values = {
        k: (str(v) if v is not None and not isinstance(v, (str, int, bool)) else v)
        for k, v in ((k, getattr(driver, k)) for k in updates)
    }
    for field, value in updates.items():
        setattr(driver, field, value)

    await _write_audit(
        db, organization_id=ctx.organization_id, user_id=ctx.user_id,
        entity_id=driver.id, action="update",
        old_values=old_values,
        new_values=payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(driver)
    return driver


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
async def terminate_driver(driver_id: uuid.UUID, ctx: DriverRemover, db: DB):
    """Soft delete: HOS logs must outlive the driver record, so the row stays as terminated."""
    driver = await get_driver_or_404(db, ctx, driver_id)
    old_status = driver.status
    driver.status = "terminated"
    await _write_audit(
        db, organization_id=ctx.organization_id, user_id=ctx.user_id,
        entity_id=driver.id, action="delete",
        old_values={"status": old_status}, new_values={"status": "terminated"},
    )
    await db.commit()
