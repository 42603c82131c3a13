from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
import logging
from ...schemas.auth import SignupIn, TokenOut, RefreshIn
from ...schemas.common import MessageOut
from ...schemas.user import UserOut
from ...services.user_service import create_user, authenticate, issue_tokens, refresh_access_token, revoke_refresh_token
from ...models.user import User
from ..deps import get_db, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()
@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    logger.info(f"Signup attempt for email: {payload.email}")
    return create_user(
        db,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        birth_date=payload.birth_date,
    )

@router.post("/token", response_model=TokenOut)
def token(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = authenticate(db, email=form.username, password=form.password)
    if not user:
        logger.warning(f"Login failed for {form.username}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect credentials")
    access, refresh_plain = issue_tokens(db, user=user)
    return TokenOut(access_token=access, refresh_token=refresh_plain)

@router.post("/refresh", response_model=TokenOut)
def refresh(payload: RefreshIn, db: Session = Depends(get_db)):
    access = refresh_access_token(db, refresh_token=payload.refresh_token)
    if not access:
        raise HTTPException(401, "Invalid or expired refresh")
    return TokenOut(access_token=access, refresh_token=payload.refresh_token)

@router.post("/logout", response_model=MessageOut)
def logout(payload: RefreshIn, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    revoke_refresh_token(db, user=current, refresh_token=payload.refresh_token)
    return MessageOut(message="Logged out")
