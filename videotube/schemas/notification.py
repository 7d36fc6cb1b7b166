"""
Notification schemas
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from videotube.schemas.common import CamelModel, OwnerSummary, Page


class NotificationVideo(CamelModel):
    id: UUID = Field(..., alias="_id")
    title: str
    thumbnail_url: str = Field(..., alias="thumbnail")


class NotificationResponse(CamelModel):
    id: UUID = Field(..., alias="_id")
    recipient_id: UUID = Field(..., alias="recipient")
    sender: Optional[OwnerSummary] = None
    type: str
    video: Optional[NotificationVideo] = None
    comment_id: Optional[UUID] = Field(None, alias="comment")
    message: str
    is_read: bool
    created_at: datetime


class NotificationPage(Page):
    """Notification list with the caller's unread total"""
    unread_count: int = 0
