from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from coupon_site.core.config import Settings
from coupon_site.core.exceptions import InvalidToken

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash password using bcrypt (safe wrapper)"""
    password_bytes = password.encode("utf-8")

    if len(password_bytes) > MAX_PASSWORD_BYTES:
        raise ValueError("Password is too long")

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify plain password against hash"""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unknown or corrupt hash format
        return False


def create_access_token(
    admin_id: str,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create JWT access token for an admin"""
    now = datetime.utcnow()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(admin_id),
        "iat": now,
        "exp": now + expires_delta,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)


def decode_token(token: str, settings: Settings) -> dict:
    """Decode and validate JWT token"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc

    if payload.get("type") != "access":
        raise InvalidToken("Invalid token type")
    return payload


def validate_token(token: str, settings: Settings) -> str:
    """Return the admin id embedded in a valid token."""
    payload = decode_token(token, settings)
    admin_id = payload.get("sub")
    if not admin_id:
        raise InvalidToken("Token has no subject")
    return admin_id
