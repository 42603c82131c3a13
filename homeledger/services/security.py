import secrets
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
import jwt
from ..core.config import settings

JWT_ALGORITHM = "HS256"
BCRYPT_MAX_BYTES = 72

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

def _bcrypt_safe(p: str) -> str:
    # bcrypt only looks at the first 72 bytes
    return p.encode("utf-8")[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")

def hash_password(p: str) -> str:
    return pwd_context.hash(_bcrypt_safe(p))

def verify_password(p: str, hashed: str) -> bool:
    return pwd_context.verify(_bcrypt_safe(p), hashed)

def create_access_token(sub: str, minutes: int | None = None) -> str:
    exp_min = minutes if minutes is not None else settings.ACCESS_TOKEN_MIN
    now = datetime.now(timezone.utc)
    payload = {"sub": sub, "iat": now, "exp": now + timedelta(minutes=exp_min), "type": "access"}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=JWT_ALGORITHM)

def decode_access_token(token: str) -> dict:
    """Decode and verify an access token. Raises ``jwt.PyJWTError`` when invalid."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[JWT_ALGORITHM])
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError("Not an access token")
    return payload

def new_refresh_token() -> str:
    """Opaque refresh token, persisted server side."""
    return secrets.token_urlsafe(48)
