"""Utility contracts attached to a dwelling.

Contracts inherit their family from the dwelling, so every permission check
resolves the dwelling first and then the requester's role in its family.
"""
import logging
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy.orm import Session
from ..core.config import settings
from ..core.errors import NotFound, ValidationFailed
from ..core.permissions import Permission, require_permission
from ..models.utility_contract import UtilityContract, UtilityType, Periodicity
from ..repositories import contract_repository, dwelling_repository
from ..db.session import commit_or_rollback
from ..utils.dates import add_days
from ..utils.files import remove_upload, safe_file_name, save_upload
from .family_service import ensure_member

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
CONTRACTS_SUBDIR = "contracts"
_UPDATABLE = ("utility_type", "provider", "tariff_plan", "start_date", "duration_days",
              "periodic_cost", "periodicity", "payment_due_date")


def _family_of_dwelling(db: Session, dwelling_id: str) -> str:
    d = dwelling_repository.get_by_id(db, dwelling_id)
    if not d:
        raise NotFound("Dwelling not found")
    return d.family_id

def _get_contract(db: Session, contract_id: str) -> UtilityContract:
    c = contract_repository.get_by_id(db, contract_id)
    if not c:
        raise NotFound("Contract not found")
    return c

def _require(db: Session, family_id: str, user_id: str, permission: Permission, message: str) -> None:
    member = ensure_member(db, user_id=user_id, family_id=family_id)
    require_permission(member, permission, message)

def _manage_message(action: str) -> str:
    return f"Only workers and the household head can {action} contracts"

def create_contract(
    db: Session, *,
    dwelling_id: str,
    requester_id: str,
    utility_type: UtilityType,
    provider: str,
    tariff_plan: str,
    start_date: date,
    duration_days: int,
    periodic_cost: Decimal,
    periodicity: Periodicity,
    payment_due_date: date | None = None,
) -> UtilityContract:
    family_id = _family_of_dwelling(db, dwelling_id)
    _require(db, family_id, requester_id, Permission.MANAGE_CONTRACTS, _manage_message("add"))
    c = UtilityContract(
        dwelling_id=dwelling_id,
        utility_type=utility_type,
        provider=provider,
        tariff_plan=tariff_plan,
        start_date=start_date,
        duration_days=duration_days,
        periodic_cost=periodic_cost,
        periodicity=periodicity,
        payment_due_date=payment_due_date or add_days(start_date, duration_days),
    )
    with commit_or_rollback(db, f"creating a contract for dwelling {dwelling_id}"):
        contract_repository.add(db, c)
    db.refresh(c)
    logger.info(f"Contract created: id={c.id}, dwelling={dwelling_id}, due={c.payment_due_date}")
    return c

def get_contract(db: Session, *, contract_id: str, requester_id: str) -> UtilityContract:
    c = _get_contract(db, contract_id)
    _require(db, c.dwelling.family_id, requester_id, Permission.VIEW_CONTRACTS, "You are not allowed to view this contract")
    return c

def list_dwelling_contracts(db: Session, *, dwelling_id: str, requester_id: str) -> list[UtilityContract]:
    family_id = _family_of_dwelling(db, dwelling_id)
    _require(db, family_id, requester_id, Permission.VIEW_CONTRACTS, "You are not allowed to view these contracts")
    return contract_repository.list_for_dwelling(db, dwelling_id=dwelling_id)

def list_family_contracts(db: Session, *, family_id: str, requester_id: str) -> list[UtilityContract]:
    _require(db, family_id, requester_id, Permission.VIEW_CONTRACTS, "You are not allowed to view these contracts")
    return contract_repository.list_for_family(db, family_id=family_id)

def update_contract(db: Session, *, contract_id: str, requester_id: str, changes: dict) -> UtilityContract:
    c = _get_contract(db, contract_id)
    _require(db, c.dwelling.family_id, requester_id, Permission.MANAGE_CONTRACTS, _manage_message("modify"))
    changes = {k: v for k, v in changes.items() if k in _UPDATABLE and v is not None}
    with commit_or_rollback(db, f"updating contract {contract_id}"):
        for field, value in changes.items():
            setattr(c, field, value)
        # keep the derived due date in step with the contract term
        if "payment_due_date" not in changes and ({"start_date", "duration_days"} & changes.keys()):
            c.payment_due_date = add_days(c.start_date, c.duration_days)
    db.refresh(c)
    logger.info(f"Contract updated: id={c.id}, fields={sorted(changes)}")
    return c

def delete_contract(db: Session, *, contract_id: str, requester_id: str) -> None:
    c = _get_contract(db, contract_id)
    _require(db, c.dwelling.family_id, requester_id, Permission.MANAGE_CONTRACTS, _manage_message("delete"))
    document = c.file_path
    with commit_or_rollback(db, f"deleting contract {contract_id}"):
        contract_repository.delete(db, c)
    remove_upload(document, upload_dir=settings.UPLOAD_DIR)
    logger.info(f"Contract deleted: id={contract_id}")

def expiring_contracts(db: Session, *, family_id: str, requester_id: str, days: int | None = None,
                       today: date | None = None) -> list[UtilityContract]:
    """Contracts whose payment is due between today and ``days`` days from now."""
    _require(db, family_id, requester_id, Permission.VIEW_CONTRACTS, "You are not allowed to view these contracts")
    days = settings.EXPIRING_CONTRACT_DAYS if days is None else days
    if days < 0:
        raise ValidationFailed("The threshold must not be negative")
    today = today or date.today()
    return contract_repository.list_due_between(db, family_id=family_id, start=today, end=today + timedelta(days=days))

def upload_contract_pdf(db: Session, *, contract_id: str, requester_id: str, file_name: str | None,
                        content_type: str | None, contents: bytes) -> UtilityContract:
    """Store a PDF for the contract. The path saved on the contract is relative to
    ``UPLOAD_DIR``; a previously stored document is removed once the new one is saved."""
    c = _get_contract(db, contract_id)
    _require(db, c.dwelling.family_id, requester_id, Permission.MANAGE_CONTRACTS, _manage_message("attach files to"))
    if content_type != PDF_CONTENT_TYPE:
        raise ValidationFailed("Only PDF files are accepted")
    if not contents:
        raise ValidationFailed("The uploaded file is empty")
    if len(contents) > settings.MAX_UPLOAD_MB * 1024 * 1024:
        raise ValidationFailed(f"The file exceeds the {settings.MAX_UPLOAD_MB} MB limit")

    try:
        new_path = save_upload(contents, upload_dir=settings.UPLOAD_DIR, subdir=CONTRACTS_SUBDIR,
                               file_name=safe_file_name(file_name, prefix="contract"))
    except OSError as e:
        logger.error(f"Error saving upload for contract {contract_id}: {str(e)}", exc_info=True)
        raise

    old_path = c.file_path
    try:
        with commit_or_rollback(db, f"attaching a document to contract {contract_id}"):
            c.file_path = new_path
    except Exception:
        remove_upload(new_path, upload_dir=settings.UPLOAD_DIR)
        raise
    if old_path and old_path != new_path:
        remove_upload(old_path, upload_dir=settings.UPLOAD_DIR)
    db.refresh(c)
    logger.info(f"Contract document stored: id={c.id}, path={c.file_path}")
    return c
