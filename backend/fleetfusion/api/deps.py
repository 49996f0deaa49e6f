from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from fleetfusion.core.database import get_db
from fleetfusion.core.permissions import UserContext, has_resource_permission
from fleetfusion.core.security import decode_access_token
from fleetfusion.models.driver import Driver
from fleetfusion.models.organization import Organization
from fleetfusion.models.user import User

security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        claims = decode_access_token(credentials.credentials)
    except ValueError:
        raise credentials_exception

    result = await db.execute(
        select(User, Organization.is_active)
        .join(Organization, Organization.id == User.organization_id)
        .where(User.id == claims.user_id)
    )
    row = result.one_or_none()
    if row is None:
        raise credentials_exception

    user, organization_active = row
    # A token minted for another organization is stale once the user moves
    if not user.is_active or not organization_active or user.organization_id != claims.organization_id:
        raise credentials_exception

    return user


async def get_user_context(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserContext:
    driver_id = None
    if current_user.role == "driver":
        result = await db.execute(
            select(Driver.id).where(
                Driver.user_id == current_user.id,
                Driver.organization_id == current_user.organization_id,
            )
        )
        driver_id = result.scalar_one_or_none()
    return UserContext.for_user(current_user, driver_id=driver_id)


def require_permission(action: str, resource: str):
    """Dependency factory: 403 unless the user's role grants ``action`` on ``resource``."""

    async def checker(
        ctx: Annotated[UserContext, Depends(get_user_context)],
    ) -> UserContext:
        if not has_resource_permission(ctx, action, resource):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions – {action}:{resource} required",
            )
        return ctx

    return checker


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentContext = Annotated[UserContext, Depends(get_user_context)]
DB = Annotated[AsyncSession, Depends(get_db)]

DriverReader = Annotated[UserContext, Depends(require_permission("read", "driver"))]
DriverCreator = Annotated[UserContext, Depends(require_permission("create", "driver"))]
DriverEditor = Annotated[UserContext, Depends(require_permission("update", "driver"))]
DriverRemover = Annotated[UserContext, Depends(require_permission("delete", "driver"))]
VehicleReader = Annotated[UserContext, Depends(require_permission("read", "vehicle"))]
VehicleCreator = Annotated[UserContext, Depends(require_permission("create", "vehicle"))]
VehicleEditor = Annotated[UserContext, Depends(require_permission("update", "vehicle"))]
VehicleRemover = Annotated[UserContext, Depends(require_permission("delete", "vehicle"))]
ComplianceReader = Annotated[UserContext, Depends(require_permission("read", "compliance"))]
ComplianceEditor = Annotated[UserContext, Depends(require_permission("update", "compliance"))]
ComplianceManager = Annotated[UserContext, Depends(require_permission("manage", "compliance"))]
DocumentReader = Annotated[UserContext, Depends(require_permission("read", "document"))]
DocumentCreator = Annotated[UserContext, Depends(require_permission("create", "document"))]
DocumentEditor = Annotated[UserContext, Depends(require_permission("update", "document"))]
DocumentRemover = Annotated[UserContext, Depends(require_permission("delete", "document"))]
OrganizationReader = Annotated[UserContext, Depends(require_permission("read", "organization"))]
OrganizationEditor = Annotated[UserContext, Depends(require_permission("update", "organization"))]
AuditReader = Annotated[UserContext, Depends(require_permission("manage", "organization"))]
