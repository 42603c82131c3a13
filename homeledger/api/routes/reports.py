from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...models.movement import MovementKind
from ...schemas.report import CategoryStatOut, MonthlyBalanceOut, TotalBalanceOut
from ...services import report_service
from ...utils.dates import current_month_year
from ...models.user import User
from ..deps import get_db, get_current_user

router = APIRouter()


@router.get("/{family_id}/reports/categories", response_model=list[CategoryStatOut])
def categories(family_id: str, kind: MovementKind = MovementKind.EXPENSE,
               month: int | None = None, year: int | None = None,
               db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    default_month, default_year = current_month_year()
    stats = report_service.category_statistics(
        db,
        family_id=family_id,
        requester_id=current.id,
        kind=kind,
        month=default_month if month is None else month,
        year=default_year if year is None else year,
    )
    return [CategoryStatOut(**vars(s)) for s in stats]

@router.get("/{family_id}/reports/monthly", response_model=list[MonthlyBalanceOut])
def monthly(family_id: str, year: int | None = None,
            db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    _, default_year = current_month_year()
    rows = report_service.monthly_balance(db, family_id=family_id, requester_id=current.id,
                                          year=default_year if year is None else year)
    return [MonthlyBalanceOut(**vars(r)) for r in rows]

@router.get("/{family_id}/reports/balance", response_model=TotalBalanceOut)
def balance(family_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return TotalBalanceOut(**vars(report_service.total_balance(db, family_id=family_id, requester_id=current.id)))
