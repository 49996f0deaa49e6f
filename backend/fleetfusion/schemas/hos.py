"""
Schemas for HOS logs and computed HOS status.

Entries are validated here, at ingestion: the calculator itself tolerates
bad durations, the API does not accept them.
"""
import uuid
from datetime import date, datetime, timezone

from pydantic import BaseModel, field_validator, model_validator

from fleetfusion.services.hos_service import DutyStatus


def _to_utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class DutyStatusEntryCreate(BaseModel):
    status: DutyStatus
    start_time: datetime
    end_time: datetime
    location: str | None = None
    remarks: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return _to_utc(v)

    @model_validator(mode="after")
    def end_after_start(self) -> "DutyStatusEntryCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class DutyStatusEntryOut(BaseModel):
    id: uuid.UUID
    status: str
    start_time: datetime
    end_time: datetime
    location: str | None
    remarks: str | None

    model_config = {"from_attributes": True}


class HosLogCreate(BaseModel):
    log_date: date
    notes: str | None = None
    entries: list[DutyStatusEntryCreate] = []


class HosLogOut(BaseModel):
    id: uuid.UUID
    driver_id: uuid.UUID
    log_date: date
    notes: str | None
    created_by: uuid.UUID | None
    created_at: datetime
    entries: list[DutyStatusEntryOut]

    model_config = {"from_attributes": True}


class HOSViolationOut(BaseModel):
    id: str
    type: str
    description: str
    severity: str
    status: str
    resolved: bool
    timestamp: datetime

    model_config = {"from_attributes": True}


class DriverHOSStatusOut(BaseModel):
    driver_id: uuid.UUID
    current_status: str
    available_drive_time: float   # minutes
    available_on_duty_time: float
    used_drive_time: float
    used_on_duty_time: float
    cycle_hours: float
    used_cycle_hours: float
    available_cycle_time: float
    restart_available: bool
    drive_time_since_break: float
    break_required_in: float
    violations: list[HOSViolationOut]
    last_logged_at: datetime | None
    compliance_status: str
    evaluated_at: datetime
    cached: bool = False

    model_config = {"from_attributes": True}
