from fleetfusion.schemas.auth import MeOut
from fleetfusion.schemas.organization import OrganizationOut, OrganizationUpdate
from fleetfusion.schemas.driver import DriverCreate, DriverUpdate, DriverOut
from fleetfusion.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleOut, VehicleInspectionCreate
from fleetfusion.schemas.hos import (
    DutyStatusEntryCreate, DutyStatusEntryOut, HosLogCreate, HosLogOut,
    HOSViolationOut, DriverHOSStatusOut,
)
from fleetfusion.schemas.compliance import (
    ComplianceDocumentCreate, ComplianceDocumentUpdate, ComplianceDocumentOut,
    ComplianceAlertOut, HosViolationRecordOut, ViolationResolve,
)
from fleetfusion.schemas.audit import AuditUserOut, AuditLogOut, AuditLogPage
from fleetfusion.schemas.webhook import IdentityEvent, IdentityEventResult

__all__ = [
    "MeOut",
    "OrganizationOut", "OrganizationUpdate",
    "DriverCreate", "DriverUpdate", "DriverOut",
    "VehicleCreate", "VehicleUpdate", "VehicleOut", "VehicleInspectionCreate",
    "DutyStatusEntryCreate", "DutyStatusEntryOut", "HosLogCreate", "HosLogOut",
    "HOSViolationOut", "DriverHOSStatusOut",
    "ComplianceDocumentCreate", "ComplianceDocumentUpdate", "ComplianceDocumentOut",
    "ComplianceAlertOut", "HosViolationRecordOut", "ViolationResolve",
    "AuditUserOut", "AuditLogOut", "AuditLogPage",
    "IdentityEvent", "IdentityEventResult",
]
