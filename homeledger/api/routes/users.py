from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.permissions import accessible_sections
from ...schemas.common import MessageOut
from ...schemas.user import UserOut, UserUpdate, MeOut, PasswordChange
from ...schemas.family import FamilyOut
from ...schemas.member import MemberOut
from ...models.user import User
from ..deps import get_db, get_current_user
from ...services.family_service import list_user_families, get_role, list_members
from ...services.user_service import update_profile, change_password, delete_account

router = APIRouter()


def _build_me_out(db: Session, user: User) -> MeOut:
    """
    Helper to build the MeOut response:
    - user info
    - the family this user belongs to, with its members
    - role in that family and the navigation sections it unlocks
    """
    families = list_user_families(db, user_id=user.id)

    families_out: List[FamilyOut] = []
    for f in families:
        members = list_members(db, family_id=f.id, requester_id=user.id)
        families_out.append(FamilyOut(
            id=f.id, surname=f.surname, invite_code=f.invite_code, created_at=f.created_at,
            members=[MemberOut.model_validate(m) for m in members],
        ))
    role = get_role(db, user_id=user.id, family_id=families[0].id) if families else None

    user_out = UserOut.model_validate(user)
    return MeOut(
        **user_out.model_dump(),
        families=families_out,
        role=role.value if role else None,
        sections=accessible_sections(role, has_family=bool(families)),
    )


@router.get("/me", response_model=MeOut)
def me(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _build_me_out(db, current)


@router.get("/me/sections", response_model=list[str])
def my_sections(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _build_me_out(db, current).sections


@router.patch("/me", response_model=MeOut)
def update_me(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    user = update_profile(
        db,
        user=current,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        birth_date=payload.birth_date,
    )
    return _build_me_out(db, user)


@router.post("/me/password", response_model=MessageOut)
def update_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    change_password(db, user=current, old_password=payload.old_password, new_password=payload.new_password)
    return MessageOut(message="Password updated")


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    delete_account(db, user=current)
