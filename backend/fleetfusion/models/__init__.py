from fleetfusion.models.organization import Organization
from fleetfusion.models.user import User
from fleetfusion.models.driver import Driver
from fleetfusion.models.vehicle import Vehicle
from fleetfusion.models.hos import HosLog, DutyStatusEntry, HosViolation
from fleetfusion.models.compliance import ComplianceDocument, ComplianceAlert
from fleetfusion.models.audit import AuditLog

__all__ = [
    "Organization",
    "User",
    "Driver",
    "Vehicle",
    "HosLog",
    "DutyStatusEntry",
    "HosViolation",
    "ComplianceDocument",
    "ComplianceAlert",
    "AuditLog",
]
