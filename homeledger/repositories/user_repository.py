from sqlalchemy import select, update
from sqlalchemy.orm import Session
from ..models.user import User
from ..models.auth import RefreshToken


def get_by_id(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)

def get_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()

def add(db: Session, user: User) -> User:
    db.add(user)
    db.flush()
    return user

def delete(db: Session, user: User) -> None:
    db.delete(user)
    db.flush()

def add_refresh_token(db: Session, token: RefreshToken) -> RefreshToken:
    db.add(token)
    db.flush()
    return token

def get_active_refresh_token(db: Session, token: str) -> RefreshToken | None:
    return db.execute(
        select(RefreshToken).where(RefreshToken.token == token, RefreshToken.is_revoked.is_(False))
    ).scalar_one_or_none()

def revoke_refresh_token(db: Session, *, token: str, user_id: str) -> int:
    result = db.execute(
        update(RefreshToken)
        .where(RefreshToken.token == token, RefreshToken.user_id == user_id)
        .values(is_revoked=True)
    )
    return result.rowcount
