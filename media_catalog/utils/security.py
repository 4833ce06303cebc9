# media_catalog/utils/security.py
from datetime import datetime, timedelta
from typing import Any, Optional
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from passlib.exc import UnknownHashError
import logging
from ..config import settings

logger = logging.getLogger(__name__)

# argon2: no 72-byte password limit
pwd_context = CryptContext(
    schemes=['argon2'],
    deprecated='auto'
)

# ============================================================
# JWT Functions
# ============================================================

def create_access_token(
    subject: Any,
    expires_delta: Optional[timedelta] = None,
    role_id: Optional[int] = None
) -> str:
    """
    Create a JWT access token.

    Args:
        subject: User ID
        expires_delta: Custom expiration time
        role_id: Role of the user at sign-in (informational, permissions are
            re-read from the database on every request)

    Returns:
        JWT token string with expiration
    """
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        'exp': expire,
        'sub': str(subject),
        'type': 'access',
        'iat': datetime.utcnow(),
        'role_id': role_id,
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate JWT token.

    Raises:
        ExpiredSignatureError: If token has expired
        JWTError: If token is invalid
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise
    except JWTError as e:
        logger.error(f"Invalid token: {e}")
        raise JWTError(f"Invalid token: {e}")


# ============================================================
# Password Functions
# ============================================================

def get_password_hash(password: str) -> str:
    """
    Hash password with argon2

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except UnknownHashError:
        logger.warning("Hash format is not recognized")
        return False
