from pydantic import BaseModel, EmailStr
import uuid
from datetime import date, datetime


class DriverOut(BaseModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    user_id: uuid.UUID | None
    employee_id: str | None
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    license_number: str | None
    license_state: str | None
    license_class: str | None
    license_expiration: date | None
    medical_card_expiration: date | None
    hire_date: date | None
    status: str
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DriverCreate(BaseModel):
    first_name: str
    last_name: str
    employee_id: str | None = None
    user_id: uuid.UUID | None = None
    email: EmailStr | None = None
    phone: str | None = None
    license_number: str | None = None
    license_state: str | None = None
    license_class: str | None = None
    license_expiration: date | None = None
    medical_card_expiration: date | None = None
    hire_date: date | None = None
    notes: str | None = None


class DriverUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    employee_id: str | None = None
    user_id: uuid.UUID | None = None  # link/unlink login account
    email: EmailStr | None = None
    phone: str | None = None
    license_number: str | None = None
    license_state: str | None = None
    license_class: str | None = None
    license_expiration: date | None = None
    medical_card_expiration: date | None = None
    hire_date: date | None = None
    status: str | None = None  # active | inactive | suspended | terminated
    notes: str | None = None
