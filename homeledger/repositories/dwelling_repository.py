from sqlalchemy import select
from sqlalchemy.orm import Session
from ..models.dwelling import Dwelling


def get_by_id(db: Session, dwelling_id: str) -> Dwelling | None:
    return db.get(Dwelling, dwelling_id)

def list_for_family(db: Session, *, family_id: str) -> list[Dwelling]:
    q = select(Dwelling).where(Dwelling.family_id == family_id).order_by(Dwelling.created_at)
    return list(db.execute(q).scalars())

def add(db: Session, dwelling: Dwelling) -> Dwelling:
    db.add(dwelling)
    db.flush()
    return dwelling

def delete(db: Session, dwelling: Dwelling) -> None:
    db.delete(dwelling)
    db.flush()
