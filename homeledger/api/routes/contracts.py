from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from ...schemas.contract import ContractCreate, ContractUpdate, ContractOut
from ...services import contract_service
from ...models.user import User
from ..deps import get_db, get_current_user

router = APIRouter()


@router.post("/", response_model=ContractOut, status_code=status.HTTP_201_CREATED)
def create(payload: ContractCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return contract_service.create_contract(db, requester_id=current.id, **payload.model_dump())

@router.get("/family/{family_id}", response_model=list[ContractOut])
def list_for_family(family_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return contract_service.list_family_contracts(db, family_id=family_id, requester_id=current.id)

@router.get("/family/{family_id}/expiring", response_model=list[ContractOut])
def expiring(family_id: str, days: int | None = None,
             db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return contract_service.expiring_contracts(db, family_id=family_id, requester_id=current.id, days=days)

@router.get("/{contract_id}", response_model=ContractOut)
def get_one(contract_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return contract_service.get_contract(db, contract_id=contract_id, requester_id=current.id)

@router.patch("/{contract_id}", response_model=ContractOut)
def update_one(contract_id: str, payload: ContractUpdate,
               db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return contract_service.update_contract(db, contract_id=contract_id, requester_id=current.id,
                                            changes=payload.model_dump(exclude_unset=True))

@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_one(contract_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    contract_service.delete_contract(db, contract_id=contract_id, requester_id=current.id)

# Upload the signed contract as a PDF
@router.post("/{contract_id}/document", response_model=ContractOut)
async def upload_document(
    contract_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    contents = await file.read()
    return contract_service.upload_contract_pdf(
        db,
        contract_id=contract_id,
        requester_id=current.id,
        file_name=file.filename,
        content_type=file.content_type,
        contents=contents,
    )
