"""
Schemas for reading the audit trail.
"""
import uuid
from datetime import datetime

from pydantic import BaseModel


class AuditUserOut(BaseModel):
    id: uuid.UUID
    email: str
    first_name: str | None
    last_name: str | None

    model_config = {"from_attributes": True}


class AuditLogOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID | None
    user: AuditUserOut | None = None
    entity_type: str
    entity_id: uuid.UUID | None
    action: str
    old_values: dict | None
    new_values: dict | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditLogPage(BaseModel):
    items: list[AuditLogOut]
    page: int
    limit: int
    total: int
    total_pages: int
