"""
Playlist schemas
"""

from typing import List, Optional
from uuid import UUID

from pydantic import Field, validator

from videotube.schemas.common import CamelModel, OwnerSummary, TimestampedModel
from videotube.schemas.video import VideoWithOwner


class PlaylistCreate(CamelModel):
    name: str
    description: str = ""

    @validator('name')
    def name_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Playlist name is required")
        return v.strip()


class PlaylistUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class PlaylistResponse(TimestampedModel):
    id: UUID = Field(..., alias="_id")
    name: str
    description: str
    owner: Optional[OwnerSummary] = None
    videos: List[VideoWithOwner] = []
    total_videos: int = 0
    total_views: int = 0
