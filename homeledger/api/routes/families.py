from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...models.family import Family
from ...models.family_member import FamilyMember
from ...schemas.common import MessageOut
from ...schemas.family import FamilyCreate, FamilyJoin, FamilyOut
from ...schemas.member import MemberOut, RoleUpdate, InviteCodeOut
from ...services.family_service import (
    create_family,
    list_user_families,
    get_family_with_members,
    join_family,
    update_member_role,
    remove_member,
    delete_family,
    regenerate_invite_code,
)
from ...models.user import User
from ..deps import get_db, get_current_user
router = APIRouter()


def _family_out(fam: Family, members: list[FamilyMember]) -> FamilyOut:
    return FamilyOut(
        id=fam.id,
        surname=fam.surname,
        invite_code=fam.invite_code,
        created_at=fam.created_at,
        members=[MemberOut.model_validate(m) for m in members],
    )

@router.post("/", response_model=FamilyOut, status_code=status.HTTP_201_CREATED)
def create(payload: FamilyCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    fam = create_family(db, owner_user_id=current.id, surname=payload.surname)
    return _family_out(*get_family_with_members(db, family_id=fam.id, requester_id=current.id))

@router.get("/my", response_model=list[FamilyOut])
def my_families(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return [
        _family_out(*get_family_with_members(db, family_id=f.id, requester_id=current.id))
        for f in list_user_families(db, user_id=current.id)
    ]

@router.post("/join", response_model=MemberOut)
def join(payload: FamilyJoin, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return join_family(db, user_id=current.id, code=payload.invite_code)

@router.get("/{family_id}", response_model=FamilyOut)
def get_one(family_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _family_out(*get_family_with_members(db, family_id=family_id, requester_id=current.id))

@router.delete("/{family_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_one(family_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    delete_family(db, family_id=family_id, requester_id=current.id)

@router.patch("/{family_id}/members/{user_id}", response_model=MemberOut)
def change_role(family_id: str, user_id: str, payload: RoleUpdate,
                db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return update_member_role(db, family_id=family_id, user_id=user_id, new_role=payload.role, requester_id=current.id)

@router.delete("/{family_id}/members/{user_id}", response_model=MessageOut)
def remove(family_id: str, user_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    family_deleted = remove_member(db, family_id=family_id, user_id=user_id, requester_id=current.id)
    if family_deleted:
        return MessageOut(message="Last member left, family deleted")
    return MessageOut(message="Member removed")

@router.post("/{family_id}/invite-code", response_model=InviteCodeOut)
def new_invite_code(family_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    fam = regenerate_invite_code(db, family_id=family_id, requester_id=current.id)
    return InviteCodeOut(family_id=fam.id, invite_code=fam.invite_code)
