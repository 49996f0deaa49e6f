import uuid
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, EmailStr, field_validator


class OrganizationOut(BaseModel):
    id: uuid.UUID
    external_id: str
    name: str
    slug: str
    dot_number: str | None
    mc_number: str | None
    address: str | None
    city: str | None
    state: str | None
    zip: str | None
    phone: str | None
    billing_email: str | None
    subscription_tier: str
    subscription_status: str
    max_users: int
    timezone: str
    settings: dict[str, Any]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class OrganizationUpdate(BaseModel):
    name: str | None = None
    dot_number: str | None = None
    mc_number: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    phone: str | None = None
    billing_email: EmailStr | None = None
    timezone: str | None = None
    settings: dict[str, Any] | None = None

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone: {v}")
        return v
