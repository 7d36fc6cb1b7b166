"""
Dependency functions for FastAPI endpoints
Authentication and common dependencies
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.exceptions import UnauthorizedError
from videotube.core.security import decode_access_token
from videotube.db.database import get_db
from videotube.models.user import User

# Bearer header is optional; the access token cookie is checked first
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/users/login", auto_error=False)

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def _extract_token(request: Request, bearer_token: Optional[str]) -> Optional[str]:
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or bearer_token


async def _load_user(db: AsyncSession, token: str) -> User:
    payload = decode_access_token(token)
    try:
        user_id = UUID(payload["sub"])
    except (ValueError, TypeError):
        raise UnauthorizedError("Invalid access token")

    user = await db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("Invalid access token")
    return user


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user from the access token

    Raises 401 if the token is missing, invalid or the user no longer exists
    """
    raw_token = _extract_token(request, token)
    if not raw_token:
        raise UnauthorizedError()
    return await _load_user(db, raw_token)


async def get_optional_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Get current user if a valid token is provided, otherwise return None

    Used for endpoints that work for both authenticated and anonymous users
    """
    raw_token = _extract_token(request, token)
    if not raw_token:
        return None
    try:
        return await _load_user(db, raw_token)
    except UnauthorizedError:
        return None
