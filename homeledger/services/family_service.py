import logging
import secrets
from sqlalchemy.orm import Session
from ..core.config import settings
from ..core.errors import Conflict, NotFound, PermissionDenied, ValidationFailed
from ..core.permissions import Permission, require_permission
from ..models.family import Family, INVITE_CODE_LENGTH
from ..models.family_member import FamilyMember, MemberRole
from ..db.session import commit_or_rollback
from ..repositories import contract_repository, family_repository
from ..utils.files import remove_upload

logger = logging.getLogger(__name__)

_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
_MAX_CODE_ATTEMPTS = 20


def _code(n=INVITE_CODE_LENGTH) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(n))

def _unique_code(db: Session) -> str:
    for _ in range(_MAX_CODE_ATTEMPTS):
        code = _code()
        if not family_repository.invite_code_exists(db, code):
            return code
    raise RuntimeError("Could not generate a unique invite code")

def normalize_code(code: str) -> str:
    # normalize code to be forgiving
    return code.strip().upper()

def _ensure_no_family(db: Session, user_id: str) -> None:
    if family_repository.list_for_user(db, user_id=user_id):
        logger.warning(f"User {user_id} already belongs to a family")
        raise Conflict("You can belong to only one family")

def _get_family(db: Session, family_id: str) -> Family:
    fam = family_repository.get_by_id(db, family_id)
    if not fam:
        raise NotFound("Family not found")
    return fam

def remove_documents(paths: list[str]) -> None:
    """Delete stored contract documents once the rows pointing at them are committed away."""
    for path in paths:
        remove_upload(path, upload_dir=settings.UPLOAD_DIR)

def create_family(db: Session, *, owner_user_id: str, surname: str) -> Family:
    _ensure_no_family(db, owner_user_id)
    with commit_or_rollback(db, f"creating a family for user {owner_user_id}"):
        fam = family_repository.add(db, Family(surname=surname, invite_code=_unique_code(db)))
        family_repository.add_member(db, user_id=owner_user_id, family_id=fam.id, role=MemberRole.HEAD)
    db.refresh(fam)
    logger.info(f"Family created: id={fam.id}, head={owner_user_id}")
    return fam

def list_user_families(db: Session, *, user_id: str) -> list[Family]:
    return family_repository.list_for_user(db, user_id=user_id)

def ensure_member(db: Session, *, user_id: str, family_id: str) -> FamilyMember | None:
    return family_repository.get_member(db, user_id=user_id, family_id=family_id)

def is_member(db: Session, *, user_id: str, family_id: str) -> bool:
    return ensure_member(db, user_id=user_id, family_id=family_id) is not None

def require_member(db: Session, *, user_id: str, family_id: str, message: str = "Not a member of this family") -> FamilyMember:
    member = ensure_member(db, user_id=user_id, family_id=family_id)
    if not member:
        raise PermissionDenied(message)
    return member

def get_role(db: Session, *, user_id: str, family_id: str) -> MemberRole | None:
    member = ensure_member(db, user_id=user_id, family_id=family_id)
    return member.role if member else None

def get_family_with_members(db: Session, *, family_id: str, requester_id: str) -> tuple[Family, list[FamilyMember]]:
    fam = _get_family(db, family_id)
    require_member(db, user_id=requester_id, family_id=family_id)
    return fam, family_repository.list_members(db, family_id=family_id)

def list_members(db: Session, *, family_id: str, requester_id: str) -> list[FamilyMember]:
    _, members = get_family_with_members(db, family_id=family_id, requester_id=requester_id)
    return members

def join_family(db: Session, *, user_id: str, code: str) -> FamilyMember:
    _ensure_no_family(db, user_id)
    fam = family_repository.get_by_invite_code(db, normalize_code(code))
    if not fam:
        raise NotFound("Invalid invite code")
    with commit_or_rollback(db, f"adding user {user_id} to family {fam.id}"):
        member = family_repository.add_member(db, user_id=user_id, family_id=fam.id, role=MemberRole.MEMBER)
    db.refresh(member)
    logger.info(f"User {user_id} joined family {fam.id}")
    return member

def update_member_role(db: Session, *, family_id: str, user_id: str, new_role: MemberRole, requester_id: str) -> FamilyMember:
    requester = ensure_member(db, user_id=requester_id, family_id=family_id)
    require_permission(requester, Permission.CHANGE_MEMBER_ROLE, "Only the household head can change roles")
    target = ensure_member(db, user_id=user_id, family_id=family_id)
    if not target:
        raise NotFound("The user is not a member of this family")
    if requester_id == user_id:
        raise ValidationFailed("You cannot change your own role")
    with commit_or_rollback(db, f"changing the role of {user_id} in family {family_id}"):
        target.role = new_role
    db.refresh(target)
    logger.info(f"Role of {user_id} in family {family_id} set to {new_role} by {requester_id}")
    return target

def remove_member(db: Session, *, family_id: str, user_id: str, requester_id: str) -> bool:
    """Remove ``user_id`` from the family. Returns True when the family was deleted
    because its last member left."""
    requester = ensure_member(db, user_id=requester_id, family_id=family_id)
    if requester_id == user_id:
        require_permission(requester, Permission.LEAVE_FAMILY, "Not a member of this family")
    else:
        require_permission(requester, Permission.REMOVE_MEMBER, "Only the household head can remove other members")

    target = ensure_member(db, user_id=user_id, family_id=family_id)
    if not target:
        raise NotFound("The member does not exist")
    if target.role == MemberRole.HEAD and family_repository.count_members(db, family_id=family_id) > 1:
        raise Conflict("The household head cannot leave the family while other members remain")

    documents = []
    family_deleted = False
    with commit_or_rollback(db, f"removing member {user_id} from family {family_id}"):
        family_repository.remove_member(db, target)
        if family_repository.count_members(db, family_id=family_id) == 0:
            documents = contract_repository.document_paths(db, family_id=family_id)
            family_repository.delete(db, _get_family(db, family_id))
            family_deleted = True
    remove_documents(documents)
    logger.info(f"Member {user_id} removed from family {family_id} by {requester_id} (family_deleted={family_deleted})")
    return family_deleted

def delete_family(db: Session, *, family_id: str, requester_id: str) -> None:
    fam = _get_family(db, family_id)
    requester = ensure_member(db, user_id=requester_id, family_id=family_id)
    require_permission(requester, Permission.DELETE_FAMILY, "Only the household head can delete the family")
    if family_repository.count_members(db, family_id=family_id) > 1:
        raise Conflict("A family with other members cannot be deleted")
    documents = contract_repository.document_paths(db, family_id=family_id)
    with commit_or_rollback(db, f"deleting family {family_id}"):
        family_repository.delete(db, fam)
    remove_documents(documents)
    logger.info(f"Family deleted: id={family_id}")

def regenerate_invite_code(db: Session, *, family_id: str, requester_id: str) -> Family:
    fam = _get_family(db, family_id)
    requester = ensure_member(db, user_id=requester_id, family_id=family_id)
    require_permission(requester, Permission.REGENERATE_INVITE_CODE, "Only the household head can regenerate the invite code")
    with commit_or_rollback(db, f"regenerating the invite code of family {family_id}"):
        fam.invite_code = _unique_code(db)
    db.refresh(fam)
    logger.info(f"Invite code regenerated for family {family_id}")
    return fam
