"""
Schemas for compliance endpoints: documents, alerts, materialized HOS violations.
"""
import uuid
from datetime import date, datetime

from pydantic import BaseModel


class ComplianceDocumentCreate(BaseModel):
    driver_id: uuid.UUID | None = None
    vehicle_id: uuid.UUID | None = None  # neither set = company document
    type: str
    title: str
    document_number: str | None = None
    issuing_authority: str | None = None
    issue_date: date | None = None
    expiration_date: date | None = None
    notes: str | None = None
    tags: list[str] = []


class ComplianceDocumentUpdate(BaseModel):
    title: str | None = None
    document_number: str | None = None
    issuing_authority: str | None = None
    issue_date: date | None = None
    expiration_date: date | None = None
    status: str | None = None  # active | expired | revoked
    is_verified: bool | None = None
    notes: str | None = None
    tags: list[str] | None = None


class ComplianceDocumentOut(BaseModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    driver_id: uuid.UUID | None
    vehicle_id: uuid.UUID | None
    type: str
    title: str
    document_number: str | None
    issuing_authority: str | None
    issue_date: date | None
    expiration_date: date | None
    status: str
    is_verified: bool
    notes: str | None
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ComplianceAlertOut(BaseModel):
    id: uuid.UUID
    driver_id: uuid.UUID | None
    vehicle_id: uuid.UUID | None
    type: str
    severity: str
    title: str
    message: str
    entity_type: str
    entity_id: uuid.UUID
    due_date: date | None
    is_acknowledged: bool
    acknowledged_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class HosViolationRecordOut(BaseModel):
    id: uuid.UUID
    driver_id: uuid.UUID
    driver_name: str | None = None
    type: str
    description: str
    severity: str
    status: str
    occurred_at: datetime
    resolved_at: datetime | None
    resolution_note: str | None

    model_config = {"from_attributes": True}


class ViolationResolve(BaseModel):
    resolution_note: str | None = None
