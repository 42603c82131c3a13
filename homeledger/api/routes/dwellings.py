from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...schemas.dwelling import DwellingCreate, DwellingUpdate, DwellingOut
from ...schemas.contract import ContractOut
from ...services import dwelling_service, contract_service
from ...models.user import User
from ..deps import get_db, get_current_user

router = APIRouter()


@router.post("/", response_model=DwellingOut, status_code=status.HTTP_201_CREATED)
def create(payload: DwellingCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return dwelling_service.create_dwelling(db, requester_id=current.id, **payload.model_dump())

@router.get("/family/{family_id}", response_model=list[DwellingOut])
def list_for_family(family_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return dwelling_service.list_dwellings(db, family_id=family_id, requester_id=current.id)

@router.get("/{dwelling_id}", response_model=DwellingOut)
def get_one(dwelling_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return dwelling_service.get_dwelling(db, dwelling_id=dwelling_id, requester_id=current.id)

@router.patch("/{dwelling_id}", response_model=DwellingOut)
def update_one(dwelling_id: str, payload: DwellingUpdate,
               db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return dwelling_service.update_dwelling(db, dwelling_id=dwelling_id, requester_id=current.id,
                                            changes=payload.model_dump(exclude_unset=True))

@router.delete("/{dwelling_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_one(dwelling_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    dwelling_service.delete_dwelling(db, dwelling_id=dwelling_id, requester_id=current.id)

@router.get("/{dwelling_id}/contracts", response_model=list[ContractOut])
def contracts(dwelling_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return contract_service.list_dwelling_contracts(db, dwelling_id=dwelling_id, requester_id=current.id)
