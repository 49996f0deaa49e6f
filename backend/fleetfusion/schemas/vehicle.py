from pydantic import BaseModel, Field
import uuid
from datetime import date, datetime


class VehicleOut(BaseModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    current_driver_id: uuid.UUID | None
    unit_number: str
    type: str
    status: str
    make: str | None
    model: str | None
    year: int | None
    vin: str | None
    license_plate: str | None
    license_plate_state: str | None
    fuel_type: str | None
    current_odometer: int | None
    registration_expiration: date | None
    insurance_expiration: date | None
    last_inspection_date: date | None
    next_inspection_due: date | None
    next_maintenance_date: date | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VehicleCreate(BaseModel):
    unit_number: str = Field(min_length=1, max_length=50)
    type: str = "tractor"
    make: str | None = None
    model: str | None = None
    year: int | None = Field(default=None, ge=1900, le=2100)
    vin: str | None = Field(default=None, max_length=17)
    license_plate: str | None = None
    license_plate_state: str | None = None
    fuel_type: str | None = None
    current_driver_id: uuid.UUID | None = None
    current_odometer: int | None = Field(default=None, ge=0)
    registration_expiration: date | None = None
    insurance_expiration: date | None = None
    next_inspection_due: date | None = None
    next_maintenance_date: date | None = None
    notes: str | None = None


class VehicleUpdate(BaseModel):
    unit_number: str | None = Field(default=None, min_length=1, max_length=50)
    type: str | None = None
    status: str | None = None  # active | inactive | maintenance | retired
    make: str | None = None
    model: str | None = None
    year: int | None = Field(default=None, ge=1900, le=2100)
    vin: str | None = Field(default=None, max_length=17)
    license_plate: str | None = None
    license_plate_state: str | None = None
    fuel_type: str | None = None
    current_driver_id: uuid.UUID | None = None  # assign/unassign
    current_odometer: int | None = Field(default=None, ge=0)
    registration_expiration: date | None = None
    insurance_expiration: date | None = None
    next_inspection_due: date | None = None
    next_maintenance_date: date | None = None
    notes: str | None = None


class VehicleInspectionCreate(BaseModel):
    inspection_date: date
    inspector: str | None = None
    next_inspection_due: date | None = None
    notes: str | None = None
