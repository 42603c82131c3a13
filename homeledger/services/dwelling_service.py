import logging
from sqlalchemy.orm import Session
from ..core.errors import NotFound
from ..core.permissions import Permission, require_permission
from ..models.dwelling import Dwelling
from ..db.session import commit_or_rollback
from ..repositories import contract_repository, dwelling_repository
from .family_service import ensure_member, remove_documents

logger = logging.getLogger(__name__)

_UPDATABLE = ("name", "address", "city", "postal_code", "province", "description")


def _get_dwelling(db: Session, dwelling_id: str) -> Dwelling:
    d = dwelling_repository.get_by_id(db, dwelling_id)
    if not d:
        raise NotFound("Dwelling not found")
    return d

def _require(db: Session, family_id: str, user_id: str, permission: Permission, message: str) -> None:
    member = ensure_member(db, user_id=user_id, family_id=family_id)
    require_permission(member, permission, message)

def create_dwelling(db: Session, *, family_id: str, requester_id: str, name: str, address: str,
                    city: str | None = None, postal_code: str | None = None, province: str | None = None,
                    description: str | None = None) -> Dwelling:
    _require(db, family_id, requester_id, Permission.MANAGE_DWELLINGS,
             "Only workers and the household head can add dwellings")
    d = Dwelling(
        family_id=family_id,
        name=name,
        address=address,
        city=city,
        postal_code=postal_code,
        province=province.upper() if province else None,
        description=description,
    )
    with commit_or_rollback(db, f"creating a dwelling for family {family_id}"):
        dwelling_repository.add(db, d)
    db.refresh(d)
    logger.info(f"Dwelling created: id={d.id}, family={family_id}")
    return d

def get_dwelling(db: Session, *, dwelling_id: str, requester_id: str) -> Dwelling:
    d = _get_dwelling(db, dwelling_id)
    _require(db, d.family_id, requester_id, Permission.VIEW_DWELLINGS, "You are not allowed to view this dwelling")
    return d

def list_dwellings(db: Session, *, family_id: str, requester_id: str) -> list[Dwelling]:
    _require(db, family_id, requester_id, Permission.VIEW_DWELLINGS,
             "You are not allowed to view the dwellings of this family")
    return dwelling_repository.list_for_family(db, family_id=family_id)

def update_dwelling(db: Session, *, dwelling_id: str, requester_id: str, changes: dict) -> Dwelling:
    d = _get_dwelling(db, dwelling_id)
    _require(db, d.family_id, requester_id, Permission.MANAGE_DWELLINGS,
             "Only workers and the household head can modify dwellings")
    changes = {k: v for k, v in changes.items() if k in _UPDATABLE and v is not None}
    if "province" in changes:
        changes["province"] = changes["province"].upper()
    with commit_or_rollback(db, f"updating dwelling {dwelling_id}"):
        for field, value in changes.items():
            setattr(d, field, value)
    db.refresh(d)
    logger.info(f"Dwelling updated: id={d.id}, fields={sorted(changes)}")
    return d

def delete_dwelling(db: Session, *, dwelling_id: str, requester_id: str) -> None:
    d = _get_dwelling(db, dwelling_id)
    _require(db, d.family_id, requester_id, Permission.MANAGE_DWELLINGS,
             "Only workers and the household head can delete dwellings")
    documents = contract_repository.document_paths(db, dwelling_id=dwelling_id)
    with commit_or_rollback(db, f"deleting dwelling {dwelling_id}"):
        dwelling_repository.delete(db, d)
    remove_documents(documents)
    logger.info(f"Dwelling deleted: id={dwelling_id} (contracts removed with it)")
