import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from cloud_kitchen.core.config import settings

ALGORITHM = "HS256"

pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_ctx.verify(plain, hashed)


def create_session_token(user_id: int, role: str, max_age: Optional[timedelta] = None) -> str:
    expires = datetime.now(timezone.utc) + (max_age or timedelta(days=settings.SESSION_MAX_AGE_DAYS))
    to_encode = {
        "sub": str(user_id),
        "role": role,
        "jti": uuid.uuid4().hex,
        "exp": expires,
    }
    return jwt.encode(to_encode, settings.SESSION_SECRET, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Optional[dict]:
    """Return the token claims, or None when the signature or expiry is bad."""
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub") or not payload.get("jti"):
        return None
    return payload
