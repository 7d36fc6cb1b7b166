"""
Subscription service: toggle and subscriber/channel listings
"""

from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.exceptions import BadRequestError, NotFoundError
from videotube.models.notification import NotificationTypeEnum
from videotube.models.subscription import Subscription
from videotube.models.user import User
from videotube.schemas.common import OwnerSummary, Page
from videotube.schemas.subscription import SubscribedChannelEntry, SubscriberEntry
from videotube.services.notification_service import NotificationService
from videotube.services.pagination import PageParams, paginate
from videotube.services.queries import with_owner_summary

logger = structlog.get_logger()


class SubscriptionService:
    """Service for channel subscriptions"""

    @staticmethod
    async def _ensure_user(db: AsyncSession, user_id: UUID, resource: str) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource)
        return user

    @staticmethod
    async def toggle_subscription(db: AsyncSession, user: User, channel_id: UUID) -> bool:
        """
        Subscribe to or unsubscribe from a channel

        Returns:
            True when the caller is now subscribed
        """
        subscriber_id, subscriber_name = user.id, user.full_name
        if channel_id == subscriber_id:
            raise BadRequestError("You cannot subscribe to your own channel")

        await SubscriptionService._ensure_user(db, channel_id, "Channel")

        result = await db.execute(
            select(Subscription).where(
                Subscription.subscriber_id == subscriber_id,
                Subscription.channel_id == channel_id
            )
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            await db.delete(existing)
            await db.commit()
            return False

        db.add(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("Subscription already exists", subscriber_id=str(subscriber_id))
            return True

        await NotificationService.create_notification(
            recipient_id=channel_id,
            sender_id=subscriber_id,
            notification_type=NotificationTypeEnum.SUBSCRIBE,
            message=f"{subscriber_name} subscribed to your channel",
        )
        return True

    @staticmethod
    async def get_channel_subscribers(db: AsyncSession, channel_id: UUID, params: PageParams) -> Page:
        await SubscriptionService._ensure_user(db, channel_id, "Channel")

        statement = (
            select(Subscription)
            .where(Subscription.channel_id == channel_id)
            .options(with_owner_summary(Subscription.subscriber))
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        )
        count_statement = select(func.count(Subscription.id)).where(Subscription.channel_id == channel_id)

        return await paginate(
            db, statement, count_statement, params,
            lambda row: SubscriberEntry(
                id=row[0].id,
                subscriber=OwnerSummary.model_validate(row[0].subscriber),
                created_at=row[0].created_at,
            )
        )

    @staticmethod
    async def get_subscribed_channels(db: AsyncSession, subscriber_id: UUID, params: PageParams) -> Page:
        await SubscriptionService._ensure_user(db, subscriber_id, "Subscriber")

        statement = (
            select(Subscription)
            .where(Subscription.subscriber_id == subscriber_id)
            .options(with_owner_summary(Subscription.channel))
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        )
        count_statement = select(func.count(Subscription.id)).where(Subscription.subscriber_id == subscriber_id)

        return await paginate(
            db, statement, count_statement, params,
            lambda row: SubscribedChannelEntry(
                id=row[0].id,
                channel=OwnerSummary.model_validate(row[0].channel),
                created_at=row[0].created_at,
            )
        )
