from datetime import date
from decimal import Decimal
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...models.movement import Movement, MovementKind, ExpenseResponsibility, category_color
from ...repositories.movement_repository import MovementFilters, MovementRow
from ...schemas.movement import ExpenseCreate, IncomeCreate, MovementUpdate, MovementOut, MovementDetailOut
from ...services import movement_service
from ...utils.dates import current_month_year
from ...models.user import User
from ..deps import get_db, get_current_user

router = APIRouter()


def _detail_out(row: MovementRow) -> MovementDetailOut:
    base = MovementOut.model_validate(row.movement)
    return MovementDetailOut(
        **base.model_dump(),
        first_name=row.first_name,
        last_name=row.last_name,
        category_color=category_color(row.movement.category),
    )

def _my_movements(db: Session, user: User, kind: MovementKind | None, month: int | None, year: int | None) -> list[Movement]:
    default_month, default_year = current_month_year()
    return movement_service.list_my_movements(
        db, user_id=user.id, month=default_month if month is None else month,
        year=default_year if year is None else year,
        kind=kind,
    )


@router.post("/expenses", response_model=MovementOut, status_code=status.HTTP_201_CREATED)
def create_expense(payload: ExpenseCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return movement_service.create_expense(db, user_id=current.id, **payload.model_dump())

@router.post("/incomes", response_model=MovementOut, status_code=status.HTTP_201_CREATED)
def create_income(payload: IncomeCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return movement_service.create_income(db, user_id=current.id, **payload.model_dump())

@router.get("/expenses/mine", response_model=list[MovementOut])
def my_expenses(month: int | None = None, year: int | None = None,
                db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _my_movements(db, current, MovementKind.EXPENSE, month, year)

@router.get("/incomes/mine", response_model=list[MovementOut])
def my_incomes(month: int | None = None, year: int | None = None,
               db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _my_movements(db, current, MovementKind.INCOME, month, year)

@router.get("/movements/mine", response_model=list[MovementOut])
def my_movements(month: int | None = None, year: int | None = None,
                 db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _my_movements(db, current, None, month, year)

@router.get("/families/{family_id}/movements", response_model=list[MovementDetailOut])
def family_movements(
    family_id: str,
    kinds: list[MovementKind] = Query(default=[]),
    categories: list[str] = Query(default=[]),
    amount_min: Decimal | None = None,
    amount_max: Decimal | None = None,
    responsibility: ExpenseResponsibility | None = None,
    user_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    filters = MovementFilters(
        kinds=kinds,
        categories=[c.strip().upper() for c in categories if c.strip()],
        amount_min=amount_min,
        amount_max=amount_max,
        responsibility=responsibility,
        user_id=user_id,
        date_from=date_from,
        date_to=date_to,
    )
    rows = movement_service.list_family_movements(db, family_id=family_id, requester_id=current.id, filters=filters)
    return [_detail_out(r) for r in rows]

@router.get("/movements/{movement_id}", response_model=MovementOut)
def get_one(movement_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return movement_service.get_movement(db, movement_id=movement_id, requester_id=current.id)

@router.patch("/movements/{movement_id}", response_model=MovementOut)
def update_one(movement_id: str, payload: MovementUpdate,
               db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("category"):
        changes["category"] = changes["category"].strip().upper()
    return movement_service.update_movement(db, movement_id=movement_id, requester_id=current.id, changes=changes)

@router.delete("/movements/{movement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_one(movement_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    movement_service.delete_movement(db, movement_id=movement_id, requester_id=current.id)

@router.delete("/expenses/{movement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(movement_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    movement_service.delete_movement(db, movement_id=movement_id, requester_id=current.id, kind=MovementKind.EXPENSE)

@router.delete("/incomes/{movement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_income(movement_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    movement_service.delete_movement(db, movement_id=movement_id, requester_id=current.id, kind=MovementKind.INCOME)
