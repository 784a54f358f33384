"""
Security utilities for authentication and authorization
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jose import JWTError, jwt

from tkms.core.config import settings

logger = logging.getLogger(__name__)

# New hashes are argon2; bcrypt hashes from imported accounts still verify
_argon2 = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password with argon2"""
    return _argon2.hash(password)


def validate_password(password: Optional[str]) -> str:
    """
    Validate and normalize password for hashing

    Args:
        password: Raw password string

    Returns:
        Normalized password (trimmed)

    Raises:
        ValueError: If password is invalid with specific error message
    """
    if password is None:
        raise ValueError("Password is required")

    password = password.strip()

    if not password:
        raise ValueError("Password cannot be empty")

    if len(password) < 6:
        raise ValueError("Password must be at least 6 characters")

    # bcrypt compatibility for accounts that may be migrated back
    if len(password.encode("utf-8")) > 72:
        raise ValueError("Password cannot be longer than 72 bytes when encoded as UTF-8")

    return password


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash"""
    if not hashed_password:
        return False

    if hashed_password.startswith("$argon2"):
        try:
            return _argon2.verify(hashed_password, plain_password)
        except (VerificationError, InvalidHashError):
            return False

    if hashed_password.startswith(("$2a$", "$2b$", "$2y$")):
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8"),
                hashed_password.encode("utf-8")
            )
        except ValueError:
            return False

    logger.warning("Unrecognised password hash scheme")
    return False


def create_access_token(data: Dict, expires_minutes: Optional[int] = None) -> str:
    """Create a JWT access token"""
    to_encode = data.copy()

    if expires_minutes is None:
        expires_minutes = settings.JWT_EXPIRE_MINUTES

    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})

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


def generate_reset_token() -> str:
    """Random URL-safe token for password reset links"""
    return secrets.token_urlsafe(32)


def check_hashing_backend() -> Dict[str, object]:
    """
    Runtime check for hashing backend availability

    Returns:
        Dict with backend status information
    """
    try:
        test_hash = hash_password("test_backend_check")
        healthy = verify_password("test_backend_check", test_hash)
    except Exception as e:
        logger.error(f"Hashing backend unavailable: {e}")
        healthy = False
    return {
        "status": "healthy" if healthy else "unhealthy",
        "primary_scheme": "argon2",
        "legacy_schemes": ["bcrypt"],
    }
