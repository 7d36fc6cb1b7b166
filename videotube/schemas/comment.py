"""
Comment schemas
"""

from typing import Optional
from uuid import UUID

from pydantic import Field, validator

from videotube.schemas.common import CamelModel, OwnerSummary, TimestampedModel


class CommentCreate(CamelModel):
    content: str

    @validator('content')
    def content_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Comment content is required")
        return v.strip()


class CommentResponse(TimestampedModel):
    id: UUID = Field(..., alias="_id")
    content: str
    video_id: Optional[UUID] = Field(None, alias="video")
    post_id: Optional[UUID] = Field(None, alias="tweet")
    owner: Optional[OwnerSummary] = None
    likes_count: int = 0
