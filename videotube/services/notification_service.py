"""
Notification Service
Handles creation and management of user notifications
"""

from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from videotube.core.exceptions import NotFoundError
from videotube.db import database
from videotube.models.notification import Notification, NotificationTypeEnum
from videotube.models.user import User
from videotube.models.video import Video
from videotube.schemas.common import OwnerSummary
from videotube.schemas.notification import NotificationPage, NotificationResponse, NotificationVideo
from videotube.services.pagination import PageParams, paginate

logger = structlog.get_logger()


def _to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        recipient_id=notification.recipient_id,
        sender=OwnerSummary.model_validate(notification.sender) if notification.sender else None,
        type=notification.type,
        video=NotificationVideo.model_validate(notification.video) if notification.video else None,
        comment_id=notification.comment_id,
        message=notification.message,
        is_read=notification.is_read,
        created_at=notification.created_at,
    )


class NotificationService:
    """Service for managing user notifications"""

    @staticmethod
    async def create_notification(
        recipient_id: UUID,
        sender_id: UUID,
        notification_type: NotificationTypeEnum,
        message: str,
        video_id: Optional[UUID] = None,
        comment_id: Optional[UUID] = None
    ) -> Optional[Notification]:
        """
        Record a notification as a side effect of a like, comment or subscription

        Runs in its own session after the triggering action has committed.
        Nothing is created when sender and recipient are the same account, and
        failures are logged and swallowed.

        Args:
            recipient_id: Account being notified
            sender_id: Account that performed the action
            notification_type: like, subscribe or comment
            message: Human readable text
            video_id: Related video (optional)
            comment_id: Related comment (optional)

        Returns:
            Created notification, or None when suppressed or failed
        """
        if recipient_id == sender_id:
            return None

        try:
            async with database.get_db_session() as db:
                notification = Notification(
                    recipient_id=recipient_id,
                    sender_id=sender_id,
                    type=NotificationTypeEnum(notification_type).value,
                    video_id=video_id,
                    comment_id=comment_id,
                    message=message,
                    is_read=False,
                )
                db.add(notification)
                await db.commit()
                return notification
        except Exception as e:
            logger.error(
                "Failed to create notification",
                recipient_id=str(recipient_id),
                sender_id=str(sender_id),
                type=str(notification_type),
                error=str(e)
            )
            return None

    @staticmethod
    async def get_user_notifications(
        db: AsyncSession,
        user_id: UUID,
        params: PageParams
    ) -> NotificationPage:
        """Newest first, with sender summary and video title/thumbnail"""
        base = select(Notification).where(Notification.recipient_id == user_id)
        statement = (
            base.options(
                joinedload(Notification.sender).load_only(
                    User.id, User.username, User.full_name, User.avatar_url
                ),
                joinedload(Notification.video).load_only(
                    Video.id, Video.title, Video.thumbnail_url
                ),
            )
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
        count_statement = select(func.count()).select_from(Notification).where(
            Notification.recipient_id == user_id
        )

        page = await paginate(db, statement, count_statement, params, lambda row: _to_response(row[0]))
        unread_count = await NotificationService.get_unread_count(db, user_id)
        return NotificationPage(**dict(page), unread_count=unread_count)

    @staticmethod
    async def get_unread_count(db: AsyncSession, user_id: UUID) -> int:
        """Get count of unread notifications"""
        result = await db.execute(
            select(func.count()).select_from(Notification).where(
                Notification.recipient_id == user_id,
                Notification.is_read.is_(False)
            )
        )
        return result.scalar_one()

    @staticmethod
    async def mark_as_read(db: AsyncSession, notification_id: UUID, user_id: UUID) -> NotificationResponse:
        """Mark one of the caller's notifications as read"""
        result = await db.execute(
            select(Notification)
            .where(
                Notification.id == notification_id,
                Notification.recipient_id == user_id
            )
            .options(joinedload(Notification.sender), joinedload(Notification.video))
        )
        notification = result.scalar_one_or_none()
        if notification is None:
            raise NotFoundError("Notification")

        notification.is_read = True
        await db.commit()
        return _to_response(notification)

    @staticmethod
    async def mark_all_as_read(db: AsyncSession, user_id: UUID) -> int:
        """Mark every unread notification of the caller as read"""
        result = await db.execute(
            update(Notification)
            .where(Notification.recipient_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        await db.commit()
        return result.rowcount

    @staticmethod
    async def delete_notification(db: AsyncSession, notification_id: UUID, user_id: UUID) -> None:
        result = await db.execute(
            delete(Notification).where(
                Notification.id == notification_id,
                Notification.recipient_id == user_id
            )
        )
        if result.rowcount == 0:
            raise NotFoundError("Notification")
        await db.commit()
