import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, Date, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetfusion.core.database import Base


class Driver(Base):
    __tablename__ = "drivers"
    __table_args__ = (UniqueConstraint("organization_id", "employee_id"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)  # login account

    employee_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # License
    license_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    license_state: Mapped[str | None] = mapped_column(String(10), nullable=True)
    license_class: Mapped[str | None] = mapped_column(String(10), nullable=True)
    license_expiration: Mapped[date | None] = mapped_column(Date, nullable=True)
    medical_card_expiration: Mapped[date | None] = mapped_column(Date, nullable=True)

    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="active")  # active | inactive | suspended | terminated
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    organization: Mapped["Organization"] = relationship(back_populates="drivers")
    user: Mapped["User | None"] = relationship(back_populates="driver")
    hos_logs: Mapped[list["HosLog"]] = relationship(back_populates="driver")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
