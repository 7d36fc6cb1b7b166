"""
Community post ("tweet") schemas
"""

from typing import Optional
from uuid import UUID

from pydantic import Field, validator

from videotube.schemas.common import CamelModel, OwnerSummary, TimestampedModel


class PostCreate(CamelModel):
    content: str

    @validator('content')
    def content_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Tweet content is required")
        return v.strip()


class PostResponse(TimestampedModel):
    id: UUID = Field(..., alias="_id")
    content: str
    owner: Optional[OwnerSummary] = None
    likes_count: int = 0
