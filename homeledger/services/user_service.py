from datetime import date, datetime, timedelta, timezone
from sqlalchemy.orm import Session
import logging
from ..core.config import settings
from ..core.errors import Conflict, NotFound, ValidationFailed
from ..models.auth import RefreshToken
from ..models.family_member import MemberRole
from ..models.user import User
from ..db.session import commit_or_rollback
from ..repositories import contract_repository, user_repository, family_repository
from .family_service import remove_documents
from .security import hash_password, verify_password, create_access_token, new_refresh_token

logger = logging.getLogger(__name__)

def create_user(db: Session, *, email: str, password: str, first_name: str, last_name: str, birth_date: date) -> User:
    if user_repository.get_by_email(db, email):
        logger.warning(f"Signup failed: email already registered - {email}")
        raise Conflict("Email already registered")
    try:
        logger.info(f"Creating user: email={email}, first_name={first_name}, last_name={last_name}")
        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            birth_date=birth_date,
            hashed_password=hash_password(password),
        )
        user_repository.add(db, user)
        db.commit()
        db.refresh(user)
        logger.info(f"User created successfully: id={user.id}, email={user.email}")
        return user
    except Exception as e:
        logger.error(f"Error creating user with email {email}: {str(e)}", exc_info=True)
        db.rollback()
        raise

def authenticate(db: Session, email: str, password: str) -> User | None:
    user = user_repository.get_by_email(db, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user

def issue_tokens(db: Session, *, user: User) -> tuple[str, str]:
    """Access JWT plus a persisted refresh token."""
    access = create_access_token(user.id)
    refresh_plain = new_refresh_token()
    rt = RefreshToken(user_id=user.id, token=refresh_plain,
                      expires_at=datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_DAYS))
    with commit_or_rollback(db, f"issuing tokens for user {user.id}"):
        user_repository.add_refresh_token(db, rt)
    return access, refresh_plain

def refresh_access_token(db: Session, *, refresh_token: str) -> str | None:
    rt = user_repository.get_active_refresh_token(db, refresh_token)
    if not rt:
        return None

    # normalize tz to avoid "offset-naive vs offset-aware" (SQLite drops tzinfo)
    now = datetime.now(timezone.utc)
    if rt.expires_at:
        exp = rt.expires_at
        exp = exp.replace(tzinfo=timezone.utc) if exp.tzinfo is None else exp.astimezone(timezone.utc)
        if exp < now:
            return None
    return create_access_token(rt.user_id)

def revoke_refresh_token(db: Session, *, user: User, refresh_token: str) -> None:
    with commit_or_rollback(db, f"revoking a refresh token of user {user.id}"):
        if not user_repository.revoke_refresh_token(db, token=refresh_token, user_id=user.id):
            raise NotFound("Refresh token not found")

def update_profile(db: Session, *, user: User, first_name: str | None = None, last_name: str | None = None,
                   email: str | None = None, birth_date: date | None = None) -> User:
    if email is not None and email != user.email and user_repository.get_by_email(db, email):
        raise Conflict("Email already registered")
    with commit_or_rollback(db, f"updating the profile of user {user.id}"):
        if email is not None:
            user.email = email
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        if birth_date is not None:
            user.birth_date = birth_date
    db.refresh(user)
    logger.info(f"Profile updated: id={user.id}")
    return user

def change_password(db: Session, *, user: User, old_password: str, new_password: str) -> None:
    if not verify_password(old_password, user.hashed_password):
        logger.warning(f"Password change refused for user {user.id}: wrong current password")
        raise ValidationFailed("Current password is incorrect")
    with commit_or_rollback(db, f"changing the password of user {user.id}"):
        user.hashed_password = hash_password(new_password)
    logger.info(f"Password changed: id={user.id}")

def delete_account(db: Session, *, user: User) -> None:
    user_id = user.id
    documents = []
    with commit_or_rollback(db, f"deleting user {user_id}"):
        # a household head cannot leave a family without a head behind them
        for family in family_repository.list_for_user(db, user_id=user.id):
            member = family_repository.get_member(db, user_id=user.id, family_id=family.id)
            if member and member.role == MemberRole.HEAD and family_repository.count_members(db, family_id=family.id) > 1:
                raise Conflict("The household head cannot delete the account while the family has other members")
            if family_repository.count_members(db, family_id=family.id) == 1:
                documents += contract_repository.document_paths(db, family_id=family.id)
                family_repository.delete(db, family)
        user_repository.delete(db, user)
    remove_documents(documents)
    logger.info(f"User deleted: id={user_id}")
