import logging
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session
from ..core.errors import NotFound, PermissionDenied, ValidationFailed
from ..core.permissions import Permission, has_permission, require_permission
from ..models.movement import (
    Movement,
    MovementKind,
    ExpenseCategory,
    IncomeCategory,
    ExpenseResponsibility,
    categories_for,
)
from ..db.session import commit_or_rollback
from ..repositories import movement_repository
from ..repositories.movement_repository import MovementFilters, MovementRow
from .family_service import ensure_member

logger = logging.getLogger(__name__)

_UPDATABLE = ("description", "amount", "date", "category", "responsibility")


def create_expense(
    db: Session, *,
    family_id: str,
    user_id: str,
    description: str,
    amount: Decimal,
    date: date,
    category: ExpenseCategory,
    responsibility: ExpenseResponsibility,
) -> Movement:
    member = ensure_member(db, user_id=user_id, family_id=family_id)
    require_permission(member, Permission.CREATE_EXPENSE, "You are not allowed to record expenses in this family")
    m = Movement(
        family_id=family_id,
        user_id=user_id,
        kind=MovementKind.EXPENSE,
        description=description,
        amount=amount,
        date=date,
        category=ExpenseCategory(category).value,
        responsibility=responsibility,
    )
    with commit_or_rollback(db, f"recording an expense in family {family_id}"):
        movement_repository.add(db, m)
    db.refresh(m)
    logger.info(f"Expense created: id={m.id}, family={family_id}, amount={amount}")
    return m

def create_income(
    db: Session, *,
    family_id: str,
    user_id: str,
    description: str,
    amount: Decimal,
    date: date,
    category: IncomeCategory,
) -> Movement:
    member = ensure_member(db, user_id=user_id, family_id=family_id)
    require_permission(member, Permission.CREATE_INCOME, "Only workers and the household head can record income")
    m = Movement(
        family_id=family_id,
        user_id=user_id,
        kind=MovementKind.INCOME,
        description=description,
        amount=amount,
        date=date,
        category=IncomeCategory(category).value,
        responsibility=None,
    )
    with commit_or_rollback(db, f"recording an income in family {family_id}"):
        movement_repository.add(db, m)
    db.refresh(m)
    logger.info(f"Income created: id={m.id}, family={family_id}, amount={amount}")
    return m

def _get_movement(db: Session, movement_id: str, kind: MovementKind | None = None) -> Movement:
    m = movement_repository.get_by_id(db, movement_id)
    if not m or (kind is not None and m.kind != kind):
        raise NotFound("Movement not found")
    return m

def get_movement(db: Session, *, movement_id: str, requester_id: str) -> Movement:
    m = _get_movement(db, movement_id)
    member = ensure_member(db, user_id=requester_id, family_id=m.family_id)
    require_permission(member, Permission.VIEW_MOVEMENTS, "You are not allowed to view this movement")
    return m

def validate_filters(filters: MovementFilters) -> None:
    if filters.amount_min is not None and filters.amount_min < 0:
        raise ValidationFailed("The minimum amount cannot be negative")
    if filters.amount_max is not None and filters.amount_max <= 0:
        raise ValidationFailed("The maximum amount must be positive")
    if filters.amount_min is not None and filters.amount_max is not None and filters.amount_min > filters.amount_max:
        raise ValidationFailed("The minimum amount cannot be greater than the maximum amount")
    if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
        raise ValidationFailed("The start date cannot be after the end date")
    known = categories_for(MovementKind.EXPENSE) | categories_for(MovementKind.INCOME)
    unknown = [c for c in filters.categories if c not in known]
    if unknown:
        raise ValidationFailed(f"Unknown categories: {', '.join(unknown)}")

def list_family_movements(db: Session, *, family_id: str, requester_id: str, filters: MovementFilters | None = None) -> list[MovementRow]:
    member = ensure_member(db, user_id=requester_id, family_id=family_id)
    require_permission(member, Permission.VIEW_MOVEMENTS, "You are not allowed to view the movements of this family")
    filters = filters or MovementFilters()
    validate_filters(filters)
    return movement_repository.list_for_family(db, family_id=family_id, filters=filters)

def list_my_movements(db: Session, *, user_id: str, month: int, year: int, kind: MovementKind | None = None) -> list[Movement]:
    if not 1 <= month <= 12:
        raise ValidationFailed("Month must be between 1 and 12")
    return movement_repository.list_for_user_month(db, user_id=user_id, month=month, year=year, kind=kind)

def _require_owner_or_head(db: Session, m: Movement, requester_id: str, action: str) -> None:
    member = ensure_member(db, user_id=requester_id, family_id=m.family_id)
    role = member.role if member else None
    is_creator = m.user_id == requester_id and has_permission(Permission.EDIT_OWN_MOVEMENT, role)
    if not (is_creator or has_permission(Permission.EDIT_ANY_MOVEMENT, role)):
        logger.warning(f"User {requester_id} refused to {action} movement {m.id}")
        raise PermissionDenied(f"Only the creator or the household head can {action} this movement")

def update_movement(db: Session, *, movement_id: str, requester_id: str, changes: dict) -> Movement:
    m = _get_movement(db, movement_id)
    _require_owner_or_head(db, m, requester_id, "modify")

    changes = {k: v for k, v in changes.items() if k in _UPDATABLE and v is not None}
    if "category" in changes and changes["category"] not in categories_for(m.kind):
        raise ValidationFailed(f"Category {changes['category']} is not valid for {m.kind.value.lower()} movements")
    if "responsibility" in changes and m.kind != MovementKind.EXPENSE:
        raise ValidationFailed("Only expenses have a responsibility")
    with commit_or_rollback(db, f"updating movement {movement_id}"):
        for field, value in changes.items():
            setattr(m, field, value)
    db.refresh(m)
    logger.info(f"Movement updated: id={m.id}, fields={sorted(changes)}")
    return m

def delete_movement(db: Session, *, movement_id: str, requester_id: str, kind: MovementKind | None = None) -> None:
    m = _get_movement(db, movement_id, kind)
    _require_owner_or_head(db, m, requester_id, "delete")
    with commit_or_rollback(db, f"deleting movement {movement_id}"):
        movement_repository.delete(db, m)
    logger.info(f"Movement deleted: id={movement_id} by {requester_id}")
