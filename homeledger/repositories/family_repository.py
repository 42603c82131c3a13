from sqlalchemy import select, func
from sqlalchemy.orm import Session, joinedload
from ..models.family import Family
from ..models.family_member import FamilyMember, MemberRole


def get_by_id(db: Session, family_id: str) -> Family | None:
    return db.get(Family, family_id)

def get_by_invite_code(db: Session, code: str) -> Family | None:
    return db.execute(select(Family).where(Family.invite_code == code)).scalar_one_or_none()

def invite_code_exists(db: Session, code: str) -> bool:
    return db.execute(select(Family.id).where(Family.invite_code == code)).first() is not None

def list_for_user(db: Session, *, user_id: str) -> list[Family]:
    q = select(Family).join(Family.members).where(FamilyMember.user_id == user_id).order_by(Family.created_at)
    return list(db.execute(q).scalars())

def add(db: Session, family: Family) -> Family:
    db.add(family)
    db.flush()
    return family

def delete(db: Session, family: Family) -> None:
    db.delete(family)
    db.flush()

def get_member(db: Session, *, user_id: str, family_id: str) -> FamilyMember | None:
    return db.execute(
        select(FamilyMember).where(FamilyMember.user_id == user_id, FamilyMember.family_id == family_id)
    ).scalar_one_or_none()

def list_members(db: Session, *, family_id: str) -> list[FamilyMember]:
    q = (
        select(FamilyMember)
        .options(joinedload(FamilyMember.user))
        .where(FamilyMember.family_id == family_id)
        .order_by(FamilyMember.joined_at)
    )
    return list(db.execute(q).scalars())

def count_members(db: Session, *, family_id: str) -> int:
    return db.execute(
        select(func.count(FamilyMember.id)).where(FamilyMember.family_id == family_id)
    ).scalar_one()

def add_member(db: Session, *, user_id: str, family_id: str, role: MemberRole) -> FamilyMember:
    member = FamilyMember(user_id=user_id, family_id=family_id, role=role)
    db.add(member)
    db.flush()
    return member

def remove_member(db: Session, member: FamilyMember) -> None:
    db.delete(member)
    db.flush()
