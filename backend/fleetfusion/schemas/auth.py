from pydantic import BaseModel
import uuid


class MeOut(BaseModel):
    id: uuid.UUID
    external_id: str
    email: str
    first_name: str | None
    last_name: str | None
    role: str
    organization_id: uuid.UUID
    driver_id: uuid.UUID | None
    is_active: bool
    onboarding_complete: bool
    permissions: list[str]
