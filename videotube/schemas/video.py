"""
Video schemas
"""

from typing import Optional
from uuid import UUID

from pydantic import Field

from videotube.schemas.common import OwnerSummary, TimestampedModel


class VideoResponse(TimestampedModel):
    id: UUID = Field(..., alias="_id")
    video_url: str = Field(..., alias="videoFile")
    thumbnail_url: str = Field(..., alias="thumbnail")
    title: str
    description: str
    duration: int
    views: int
    is_published: bool
    owner_id: UUID = Field(..., alias="ownerId")


class VideoWithOwner(VideoResponse):
    """Feed entry"""
    owner: Optional[OwnerSummary] = None


class VideoDetail(VideoWithOwner):
    """Single video page"""
    likes_count: int = 0
    subscribers_count: int = 0
    is_liked: bool = False
    is_subscribed: bool = False


class DashboardVideo(VideoResponse):
    likes_count: int = 0
    comments_count: int = 0
