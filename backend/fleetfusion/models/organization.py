import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON, Boolean, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetfusion.core.database import Base


class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    external_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)  # identity-provider org id
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    # Business information
    dot_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    mc_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip: Mapped[str | None] = mapped_column(String(20), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    billing_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    subscription_tier: Mapped[str] = mapped_column(String(50), default="free")      # free | pro | enterprise
    subscription_status: Mapped[str] = mapped_column(String(50), default="trial")   # active | inactive | trial | cancelled
    max_users: Mapped[int] = mapped_column(Integer, default=5)

    timezone: Mapped[str] = mapped_column(String(64), default="America/Denver")  # IANA name, HOS day boundaries
    settings: Mapped[dict] = mapped_column(JSON, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    users: Mapped[list["User"]] = relationship(back_populates="organization", cascade="all, delete-orphan")
    drivers: Mapped[list["Driver"]] = relationship(back_populates="organization", cascade="all, delete-orphan")
