"""
Subscription schemas
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from videotube.schemas.common import CamelModel, OwnerSummary


class SubscriptionToggleResult(CamelModel):
    subscribed: bool


class SubscriberEntry(CamelModel):
    id: UUID = Field(..., alias="_id")
    subscriber: Optional[OwnerSummary] = None
    created_at: datetime


class SubscribedChannelEntry(CamelModel):
    id: UUID = Field(..., alias="_id")
    channel: Optional[OwnerSummary] = None
    created_at: datetime
