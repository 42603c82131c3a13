import datetime
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING
from sqlalchemy import String, DateTime, Date, ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship
from uuid import uuid4
from ..db.base_class import Base
from . import utcnow

if TYPE_CHECKING:
    from .family import Family
    from .user import User

class MovementKind(StrEnum):
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"

class ExpenseResponsibility(StrEnum):
    PERSONAL = "PERSONAL"
    FAMILY = "FAMILY"

class ExpenseCategory(StrEnum):
    GROCERIES = "GROCERIES"
    TRANSPORT = "TRANSPORT"
    HOUSING = "HOUSING"
    HEALTH = "HEALTH"
    LEISURE = "LEISURE"
    EDUCATION = "EDUCATION"
    TAXES = "TAXES"
    PETS = "PETS"
    EXTRAORDINARY = "EXTRAORDINARY"

class IncomeCategory(StrEnum):
    SALARY = "SALARY"
    OCCASIONAL = "OCCASIONAL"
    BENEFITS = "BENEFITS"
    INTEREST = "INTEREST"

# Chart colours shown next to each category
CATEGORY_COLORS: dict[str, str] = {
    ExpenseCategory.GROCERIES: "#10b981",
    ExpenseCategory.TRANSPORT: "#3b82f6",
    ExpenseCategory.HOUSING: "#8b5cf6",
    ExpenseCategory.HEALTH: "#ef4444",
    ExpenseCategory.LEISURE: "#f59e0b",
    ExpenseCategory.EDUCATION: "#06b6d4",
    ExpenseCategory.TAXES: "#6366f1",
    ExpenseCategory.PETS: "#ec4899",
    ExpenseCategory.EXTRAORDINARY: "#84cc16",
    IncomeCategory.SALARY: "#22c55e",
    IncomeCategory.OCCASIONAL: "#0ea5e9",
    IncomeCategory.BENEFITS: "#a855f7",
    IncomeCategory.INTEREST: "#14b8a6",
}
DEFAULT_CATEGORY_COLOR = "#6b7280"

def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, DEFAULT_CATEGORY_COLOR)

def categories_for(kind: MovementKind) -> set[str]:
    if kind == MovementKind.EXPENSE:
        return {c.value for c in ExpenseCategory}
    return {c.value for c in IncomeCategory}

class Movement(Base):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    family_id: Mapped[str] = mapped_column(String(36), ForeignKey("family.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("user.id", ondelete="CASCADE"), index=True)
    kind: Mapped[MovementKind] = mapped_column(index=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, index=True, nullable=False)
    category: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    responsibility: Mapped[ExpenseResponsibility | None] = mapped_column()
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    family: Mapped["Family"] = relationship(back_populates="movements")
    user: Mapped["User"] = relationship(back_populates="movements")
