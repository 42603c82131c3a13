from datetime import date
from sqlalchemy import select
from sqlalchemy.orm import Session
from ..models.dwelling import Dwelling
from ..models.utility_contract import UtilityContract


def get_by_id(db: Session, contract_id: str) -> UtilityContract | None:
    return db.get(UtilityContract, contract_id)

def list_for_dwelling(db: Session, *, dwelling_id: str) -> list[UtilityContract]:
    q = select(UtilityContract).where(UtilityContract.dwelling_id == dwelling_id).order_by(UtilityContract.start_date)
    return list(db.execute(q).scalars())

def list_for_family(db: Session, *, family_id: str) -> list[UtilityContract]:
    q = (
        select(UtilityContract)
        .join(Dwelling, UtilityContract.dwelling_id == Dwelling.id)
        .where(Dwelling.family_id == family_id)
        .order_by(UtilityContract.start_date)
    )
    return list(db.execute(q).scalars())

def list_due_between(db: Session, *, family_id: str, start: date, end: date) -> list[UtilityContract]:
    q = (
        select(UtilityContract)
        .join(Dwelling, UtilityContract.dwelling_id == Dwelling.id)
        .where(
            Dwelling.family_id == family_id,
            UtilityContract.payment_due_date.is_not(None),
            UtilityContract.payment_due_date >= start,
            UtilityContract.payment_due_date <= end,
        )
        .order_by(UtilityContract.payment_due_date)
    )
    return list(db.execute(q).scalars())

def add(db: Session, contract: UtilityContract) -> UtilityContract:
    db.add(contract)
    db.flush()
    return contract

def delete(db: Session, contract: UtilityContract) -> None:
    db.delete(contract)
    db.flush()

def document_paths(db: Session, *, family_id: str | None = None, dwelling_id: str | None = None) -> list[str]:
    """Stored PDF paths of the contracts of a family or of a single dwelling."""
    q = (
        select(UtilityContract.file_path)
        .join(Dwelling, UtilityContract.dwelling_id == Dwelling.id)
        .where(UtilityContract.file_path.is_not(None))
    )
    if family_id is not None:
        q = q.where(Dwelling.family_id == family_id)
    if dwelling_id is not None:
        q = q.where(UtilityContract.dwelling_id == dwelling_id)
    return list(db.execute(q).scalars())
