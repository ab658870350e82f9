"""
Security utilities for authentication and authorization
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
from jose import JWTError, jwt
from passlib.context import CryptContext

from presence.core.config import settings
from presence.core.constants import SERVICE_NAME

logger = logging.getLogger(__name__)

try:
    import argon2
    from argon2.exceptions import VerificationError, InvalidHashError
    argon2_available = True
except ImportError:
    argon2 = None
    argon2_available = False
    logger.warning("argon2-cffi not installed, hashing new passwords with bcrypt")

# Only used to verify hashes written by other schemes
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password (argon2 preferred, bcrypt fallback)"""
    if argon2_available:
        return argon2.PasswordHasher().hash(password)

    password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    if hashed_password.startswith("$argon2"):
        if not argon2_available:
            logger.error("argon2 hash found but argon2-cffi is not installed")
            return False
        try:
            return argon2.PasswordHasher().verify(hashed_password, plain_password)
        except (VerificationError, InvalidHashError):
            return False

    if hashed_password.startswith("$2"):
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES],
                hashed_password.encode("utf-8"),
            )
        except ValueError:
            return False

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(data: Dict, expires_minutes: Optional[int] = None) -> str:
    """Create a JWT access token"""
    to_encode = data.copy()

    if expires_minutes is None:
        expires_minutes = settings.JWT_EXPIRE_MINUTES

    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire, "iss": SERVICE_NAME})

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> Dict:
    """Decode and verify a JWT token"""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise ValueError("Invalid token")
