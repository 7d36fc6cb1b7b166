"""
Security utilities for authentication and authorization
"""

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from videotube.core.config import settings
from videotube.core.exceptions import BadRequestError, UnauthorizedError

# Password hashing context with explicit bcrypt configuration
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash"""
    # bcrypt only looks at the first 72 bytes
    if len(password.encode('utf-8')) > 72:
        raise BadRequestError("Password is too long")
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(data: dict) -> str:
    """Create JWT refresh token (longer expiry, separate secret)"""
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire, "type": "refresh", "jti": uuid4().hex})
    return jwt.encode(to_encode, settings.REFRESH_SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify and decode JWT access token"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Invalid access token")
    if payload.get("type") != "access" or payload.get("sub") is None:
        raise UnauthorizedError("Invalid access token")
    return payload


def decode_refresh_token(token: str) -> dict:
    """Verify and decode JWT refresh token"""
    try:
        payload = jwt.decode(token, settings.REFRESH_SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Invalid refresh token")
    if payload.get("type") != "refresh" or payload.get("sub") is None:
        raise UnauthorizedError("Invalid refresh token")
    return payload


def generate_token() -> str:
    """Raw single-use token sent to the user by email"""
    return secrets.token_hex(32)


def hash_token(raw_token: str) -> str:
    """Digest stored in place of a raw email token"""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()
