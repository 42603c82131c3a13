from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from sqlalchemy import select, func, extract
from sqlalchemy.orm import Session

from ..models.movement import Movement, MovementKind, ExpenseResponsibility
from ..models.user import User


@dataclass
class MovementFilters:
    kinds: list[MovementKind] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    amount_min: Decimal | None = None
    amount_max: Decimal | None = None
    responsibility: ExpenseResponsibility | None = None
    user_id: str | None = None
    date_from: date | None = None
    date_to: date | None = None


@dataclass
class MovementRow:
    movement: Movement
    first_name: str
    last_name: str


@dataclass
class CategoryTotal:
    category: str
    total: Decimal
    count: int


@dataclass
class MonthKindTotal:
    month: int
    kind: MovementKind
    total: Decimal


def get_by_id(db: Session, movement_id: str) -> Movement | None:
    return db.get(Movement, movement_id)

def add(db: Session, movement: Movement) -> Movement:
    db.add(movement)
    db.flush()
    return movement

def delete(db: Session, movement: Movement) -> None:
    db.delete(movement)
    db.flush()

def list_for_family(db: Session, *, family_id: str, filters: MovementFilters | None = None) -> list[MovementRow]:
    filters = filters or MovementFilters()
    q = (
        select(Movement, User.first_name, User.last_name)
        .join(User, Movement.user_id == User.id)
        .where(Movement.family_id == family_id)
    )
    if filters.kinds:
        q = q.where(Movement.kind.in_(filters.kinds))
    if filters.categories:
        q = q.where(Movement.category.in_(filters.categories))
    if filters.amount_min is not None:
        q = q.where(Movement.amount >= filters.amount_min)
    if filters.amount_max is not None:
        q = q.where(Movement.amount <= filters.amount_max)
    if filters.responsibility is not None:
        q = q.where(Movement.responsibility == filters.responsibility)
    if filters.user_id:
        q = q.where(Movement.user_id == filters.user_id)
    if filters.date_from:
        q = q.where(Movement.date >= filters.date_from)
    if filters.date_to:
        q = q.where(Movement.date <= filters.date_to)
    q = q.order_by(Movement.date.desc(), Movement.created_at.desc())

    return [MovementRow(movement=m, first_name=first, last_name=last) for m, first, last in db.execute(q).all()]

def list_for_user_month(db: Session, *, user_id: str, month: int, year: int, kind: MovementKind | None = None) -> list[Movement]:
    q = select(Movement).where(
        Movement.user_id == user_id,
        extract("month", Movement.date) == month,
        extract("year", Movement.date) == year,
    )
    if kind is not None:
        q = q.where(Movement.kind == kind)
    q = q.order_by(Movement.date.desc(), Movement.created_at.desc())
    return list(db.execute(q).scalars())

def totals_by_category(db: Session, *, family_id: str, kind: MovementKind, month: int, year: int) -> list[CategoryTotal]:
    total = func.sum(Movement.amount).label("total")
    q = (
        select(Movement.category, total, func.count(Movement.id))
        .where(
            Movement.family_id == family_id,
            Movement.kind == kind,
            extract("month", Movement.date) == month,
            extract("year", Movement.date) == year,
        )
        .group_by(Movement.category)
        .order_by(total.desc())
    )
    return [
        CategoryTotal(category=category, total=Decimal(str(amount or 0)), count=count)
        for category, amount, count in db.execute(q).all()
    ]

def totals_by_month(db: Session, *, family_id: str, year: int) -> list[MonthKindTotal]:
    month = extract("month", Movement.date).label("month")
    q = (
        select(month, Movement.kind, func.sum(Movement.amount))
        .where(Movement.family_id == family_id, extract("year", Movement.date) == year)
        .group_by(month, Movement.kind)
        .order_by(month)
    )
    return [
        MonthKindTotal(month=int(m), kind=MovementKind(kind), total=Decimal(str(amount or 0)))
        for m, kind, amount in db.execute(q).all()
    ]

def totals_by_kind(db: Session, *, family_id: str) -> dict[MovementKind, Decimal]:
    q = (
        select(Movement.kind, func.sum(Movement.amount))
        .where(Movement.family_id == family_id)
        .group_by(Movement.kind)
    )
    return {MovementKind(kind): Decimal(str(amount or 0)) for kind, amount in db.execute(q).all()}
