"""
Notifications API Endpoints
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.config import settings
from videotube.core.deps import get_current_user
from videotube.db.database import get_db
from videotube.models.user import User
from videotube.services.notification_service import NotificationService
from videotube.services.pagination import PageParams
from videotube.utils.api_response import api_response

router = APIRouter()


@router.get("")
async def get_notifications(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get notifications for the current user, newest first

    - **page**: 1-based page number
    - **limit**: Page size (defaults to 20)
    """
    params = PageParams.from_query(page, limit, default_limit=settings.NOTIFICATION_PAGE_SIZE)
    notifications = await NotificationService.get_user_notifications(db, current_user.id, params)
    return api_response(notifications, "Notifications fetched successfully")


@router.get("/unread-count")
async def get_unread_count(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    count = await NotificationService.get_unread_count(db, current_user.id)
    return api_response({"unreadCount": count}, "Unread count fetched successfully")


@router.patch("/read-all")
async def mark_all_as_read(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    count = await NotificationService.mark_all_as_read(db, current_user.id)
    return api_response({"modifiedCount": count}, "All notifications marked as read")


@router.patch("/{notification_id}/read")
async def mark_as_read(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notification = await NotificationService.mark_as_read(db, notification_id, current_user.id)
    return api_response(notification, "Notification marked as read")


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await NotificationService.delete_notification(db, notification_id, current_user.id)
    return api_response({}, "Notification deleted successfully")
