import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, Date, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fleetfusion.core.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"
    __table_args__ = (UniqueConstraint("organization_id", "unit_number"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    current_driver_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("drivers.id"), nullable=True)

    unit_number: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[str] = mapped_column(String(50), default="tractor")  # tractor | trailer | straight_truck | van
    status: Mapped[str] = mapped_column(String(50), default="active")  # active | inactive | maintenance | retired
    make: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    vin: Mapped[str | None] = mapped_column(String(17), nullable=True)
    license_plate: Mapped[str | None] = mapped_column(String(20), nullable=True)
    license_plate_state: Mapped[str | None] = mapped_column(String(10), nullable=True)
    fuel_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    current_odometer: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Due dates
    registration_expiration: Mapped[date | None] = mapped_column(Date, nullable=True)
    insurance_expiration: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_inspection_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_inspection_due: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_maintenance_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def display_name(self) -> str:
        details = " ".join(str(p) for p in (self.year, self.make, self.model) if p)
        return f"Unit {self.unit_number} ({details})" if details else f"Unit {self.unit_number}"
