from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from .config import get_settings
from . import errors


pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
settings = get_settings()


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # unparseable hash (e.g. a seed placeholder) never matches
        return False


def create_token(data: dict, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm="HS256")


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "base_id": user.base_id,
    }
    return create_token(claims, expires_delta or timedelta(hours=settings.jwt_expire_hours))


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])
    except ExpiredSignatureError as exc:
        raise errors.Unauthorized("Token expired. Please login again.") from exc
    except JWTError as exc:
        raise errors.Unauthorized("Invalid or expired token. Please login again.") from exc
