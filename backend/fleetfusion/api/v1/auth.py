from fastapi import APIRouter

from fleetfusion.api.deps import CurrentContext, CurrentUser
from fleetfusion.schemas.auth import MeOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=MeOut)
async def get_me(current_user: CurrentUser, ctx: CurrentContext):
    """Sessions are issued by the identity provider; this only reports who the token belongs to."""
    return MeOut(
        id=current_user.id,
        external_id=current_user.external_id,
        email=current_user.email,
        first_name=current_user.first_name,
        last_name=current_user.last_name,
        role=current_user.role,
        organization_id=current_user.organization_id,
        driver_id=ctx.driver_id,
        is_active=current_user.is_active,
        onboarding_complete=current_user.onboarding_complete,
        permissions=sorted(ctx.permissions),
    )
