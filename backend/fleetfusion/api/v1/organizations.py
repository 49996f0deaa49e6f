from fastapi import APIRouter, HTTPException
from sqlalchemy import select

from fleetfusion.api.deps import DB, OrganizationReader, OrganizationEditor
from fleetfusion.models.organization import Organization
from fleetfusion.schemas.organization import OrganizationOut, OrganizationUpdate

router = APIRouter(prefix="/organizations", tags=["organizations"])


async def _own_organization(db, ctx) -> Organization:
    result = await db.execute(select(Organization).where(Organization.id == ctx.organization_id))
    organization = result.scalar_one_or_none()
    if not organization:
        raise HTTPException(status_code=404, detail="Organization not found")
    return organization


@router.get("/me", response_model=OrganizationOut)
async def get_organization(ctx: OrganizationReader, db: DB):
    return await _own_organization(db, ctx)


@router.put("/me", response_model=OrganizationOut)
async def update_organization(payload: OrganizationUpdate, ctx: OrganizationEditor, db: DB):
    """Business data and time zone. Name and slug are owned by the identity provider but may be overridden here."""
    organization = await _own_organization(db, ctx)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(organization, field, value)
    await db.commit()
    await db.refresh(organization)
    return organization
