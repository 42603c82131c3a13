from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING
from sqlalchemy import String, DateTime, Date, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship
from uuid import uuid4
from ..db.base_class import Base
from . import utcnow

if TYPE_CHECKING:
    from .dwelling import Dwelling

class UtilityType(StrEnum):
    ELECTRICITY = "ELECTRICITY"
    GAS = "GAS"
    WATER = "WATER"
    INTERNET = "INTERNET"
    PHONE = "PHONE"
    WASTE = "WASTE"
    OTHER = "OTHER"

class Periodicity(StrEnum):
    MONTHLY = "MONTHLY"
    BIMONTHLY = "BIMONTHLY"
    QUARTERLY = "QUARTERLY"
    SEMIANNUAL = "SEMIANNUAL"
    ANNUAL = "ANNUAL"

class UtilityContract(Base):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    dwelling_id: Mapped[str] = mapped_column(String(36), ForeignKey("dwelling.id", ondelete="CASCADE"), index=True)
    utility_type: Mapped[UtilityType] = mapped_column(index=True)
    provider: Mapped[str] = mapped_column(String(100), nullable=False)
    tariff_plan: Mapped[str] = mapped_column(String(100), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    periodic_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    periodicity: Mapped[Periodicity] = mapped_column()
    payment_due_date: Mapped[date | None] = mapped_column(Date, index=True)
    file_path: Mapped[str | None] = mapped_column(String(512))
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    dwelling: Mapped["Dwelling"] = relationship(back_populates="contracts")
