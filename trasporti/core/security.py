from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import SecuritySettings, get_settings
from .exceptions import ForbiddenError, InternalServerError


# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to verify against

    Returns:
        True if password matches hash
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def _security_settings(settings: Optional[SecuritySettings]) -> SecuritySettings:
    settings = settings or get_settings().security
    if not settings.secret:
        raise InternalServerError("JWT secret is not configured")
    return settings


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
    settings: Optional[SecuritySettings] = None,
) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to encode in the token (identity and role)
        expires_delta: Custom expiration time, defaults to the admin expiry
        settings: Security settings, defaults to the application settings

    Returns:
        Encoded JWT token
    """
    settings = _security_settings(settings)
    to_encode = data.copy()

    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.admin_token_expire_minutes)

    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
    })

    return jwt.encode(to_encode, settings.secret, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Optional[SecuritySettings] = None) -> Dict[str, Any]:
    """
    Verify and decode a JWT token.

    Raises:
        ForbiddenError: If the token is invalid or expired
    """
    settings = _security_settings(settings)
    try:
        return jwt.decode(token, settings.secret, algorithms=[settings.algorithm])
    except JWTError as e:
        raise ForbiddenError("Invalid token", details={"reason": str(e)}) from e
