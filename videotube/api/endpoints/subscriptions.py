"""
Subscription endpoints
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.deps import get_current_user
from videotube.db.database import get_db
from videotube.models.user import User
from videotube.schemas.subscription import SubscriptionToggleResult
from videotube.services.pagination import PageParams
from videotube.services.subscription_service import SubscriptionService
from videotube.utils.api_response import api_response

router = APIRouter()


@router.post("/c/{channel_id}")
async def toggle_subscription(
    channel_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    subscribed = await SubscriptionService.toggle_subscription(db, current_user, channel_id)
    if subscribed:
        return api_response(
            SubscriptionToggleResult(subscribed=True),
            "Subscribed successfully",
            status.HTTP_201_CREATED
        )
    return api_response(SubscriptionToggleResult(subscribed=False), "Unsubscribed successfully")


@router.get("/c/{channel_id}")
async def get_channel_subscribers(
    channel_id: UUID,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    subscribers = await SubscriptionService.get_channel_subscribers(
        db, channel_id, PageParams.from_query(page, limit)
    )
    return api_response(subscribers, "Subscribers fetched successfully")


@router.get("/u/{subscriber_id}")
async def get_subscribed_channels(
    subscriber_id: UUID,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    channels = await SubscriptionService.get_subscribed_channels(
        db, subscriber_id, PageParams.from_query(page, limit)
    )
    return api_response(channels, "Subscribed channels fetched successfully")
