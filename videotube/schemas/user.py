"""
Account schemas for request/response models
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, validator

from videotube.schemas.common import CamelModel, OwnerSummary, TimestampedModel
from videotube.utils.password_validation import validate_password_strength


def _check_password(v: str) -> str:
    result = validate_password_strength(v)
    if not result.is_valid:
        raise ValueError('; '.join(result.errors))
    return v


class UserResponse(TimestampedModel):
    """Account as returned to its owner (without sensitive data)"""
    id: UUID = Field(..., alias="_id")
    username: str
    email: str
    full_name: str
    avatar_url: str = Field(..., alias="avatar")
    cover_image_url: Optional[str] = Field(None, alias="coverImage")


class ChannelProfile(UserResponse):
    """Public channel page with subscription counts"""
    subscribers_count: int = 0
    channels_subscribed_to_count: int = 0
    is_subscribed: bool = False


class LoginRequest(CamelModel):
    """Login with email or username"""
    email: Optional[str] = None
    username: Optional[str] = None
    password: str


class LoginResponse(CamelModel):
    user: UserResponse
    access_token: str
    refresh_token: str


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    old_password: str
    new_password: str

    @validator('new_password')
    def validate_password_strength(cls, v):
        """Validate password meets security requirements"""
        return _check_password(v)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    password: str

    @validator('password')
    def validate_password_strength(cls, v):
        """Validate password meets security requirements"""
        return _check_password(v)


class UpdateAccountRequest(CamelModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None

    @validator('full_name')
    def full_name_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip() if v else v


class WatchHistoryItem(CamelModel):
    """Video in the watch history with owner summary"""
    id: UUID = Field(..., alias="_id")
    title: str
    thumbnail_url: str = Field(..., alias="thumbnail")
    duration: int
    views: int
    owner: Optional[OwnerSummary] = None
    watched_at: datetime
