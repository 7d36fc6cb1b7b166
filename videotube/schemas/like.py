"""
Like schemas
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from videotube.schemas.common import CamelModel, OwnerSummary
from videotube.schemas.video import VideoWithOwner


class LikeToggleResult(CamelModel):
    is_liked: bool


class LikedVideo(VideoWithOwner):
    """Video in the caller's liked list"""
    liked_at: datetime


class VideoLiker(CamelModel):
    id: UUID = Field(..., alias="_id")
    user: Optional[OwnerSummary] = None
    created_at: datetime
