"""Aggregated views over a family's movements.

All figures are returned as plain floats rounded to cents, ready for the
charts on the report page.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from sqlalchemy.orm import Session
from ..core.errors import ValidationFailed
from ..core.permissions import Permission, require_permission
from ..models.movement import MovementKind, category_color
from ..repositories import movement_repository
from .family_service import ensure_member

logger = logging.getLogger(__name__)


@dataclass
class CategoryStat:
    category: str
    color: str
    total: float
    count: int
    percentage: float


@dataclass
class MonthlyBalance:
    month: int
    year: int
    total_income: float
    total_expenses: float
    balance: float


@dataclass
class TotalBalance:
    family_id: str
    total_income: float
    total_expenses: float
    balance: float


def _money(value: Decimal) -> float:
    return float(round(value, 2))

def _require_report_access(db: Session, family_id: str, requester_id: str) -> None:
    member = ensure_member(db, user_id=requester_id, family_id=family_id)
    require_permission(member, Permission.VIEW_REPORT, "You are not allowed to view the reports of this family")

def category_statistics(db: Session, *, family_id: str, requester_id: str, kind: MovementKind, month: int, year: int) -> list[CategoryStat]:
    _require_report_access(db, family_id, requester_id)
    if not 1 <= month <= 12:
        raise ValidationFailed("Month must be between 1 and 12")

    rows = movement_repository.totals_by_category(db, family_id=family_id, kind=kind, month=month, year=year)
    grand_total = sum((r.total for r in rows), Decimal("0"))
    return [
        CategoryStat(
            category=r.category,
            color=category_color(r.category),
            total=_money(r.total),
            count=r.count,
            percentage=float(r.total / grand_total * 100) if grand_total > 0 else 0.0,
        )
        for r in rows
    ]

def monthly_balance(db: Session, *, family_id: str, requester_id: str, year: int) -> list[MonthlyBalance]:
    _require_report_access(db, family_id, requester_id)

    income = {m: Decimal("0") for m in range(1, 13)}
    expenses = {m: Decimal("0") for m in range(1, 13)}
    for row in movement_repository.totals_by_month(db, family_id=family_id, year=year):
        target = income if row.kind == MovementKind.INCOME else expenses
        target[row.month] += row.total

    return [
        MonthlyBalance(
            month=m,
            year=year,
            total_income=_money(income[m]),
            total_expenses=_money(expenses[m]),
            balance=_money(income[m] - expenses[m]),
        )
        for m in range(1, 13)
    ]

def total_balance(db: Session, *, family_id: str, requester_id: str) -> TotalBalance:
    _require_report_access(db, family_id, requester_id)
    totals = movement_repository.totals_by_kind(db, family_id=family_id)
    income = totals.get(MovementKind.INCOME, Decimal("0"))
    expenses = totals.get(MovementKind.EXPENSE, Decimal("0"))
    return TotalBalance(
        family_id=family_id,
        total_income=_money(income),
        total_expenses=_money(expenses),
        balance=_money(income - expenses),
    )
