"""
Like service: toggles on videos, comments and posts plus liked-video listings
"""

from typing import List
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from videotube.core.exceptions import NotFoundError
from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.notification import NotificationTypeEnum
from videotube.models.post import Post
from videotube.models.user import User
from videotube.models.video import Video
from videotube.schemas.common import OwnerSummary
from videotube.schemas.like import LikedVideo, VideoLiker
from videotube.services.notification_service import NotificationService
from videotube.services.queries import with_owner_summary
from videotube.services.video_service import to_video_with_owner

logger = structlog.get_logger()


class LikeService:
    """Service for like toggles"""

    @staticmethod
    async def _toggle(db: AsyncSession, user: User, target_field: str, target_id: UUID) -> bool:
        """
        Flip the existence of the (user, target) like

        Returns:
            True when the like now exists, False when it was removed
        """
        user_id = user.id
        target_column = getattr(Like, target_field)
        result = await db.execute(
            select(Like).where(Like.liked_by_id == user_id, target_column == target_id)
        )
        existing = result.scalar_one_or_none()

        if existing is not None:
            await db.delete(existing)
            await db.commit()
            return False

        db.add(Like(liked_by_id=user_id, **{target_field: target_id}))
        try:
            await db.commit()
        except IntegrityError:
            # A concurrent request created the same like first
            await db.rollback()
            logger.info("Like already exists", user_id=str(user_id), target=target_field)
        return True

    @staticmethod
    async def toggle_video_like(db: AsyncSession, user: User, video_id: UUID) -> bool:
        video = await db.get(Video, video_id)
        if video is None:
            raise NotFoundError("Video")

        owner_id, title = video.owner_id, video.title
        sender_id, sender_name = user.id, user.full_name
        is_liked = await LikeService._toggle(db, user, "video_id", video_id)
        if is_liked:
            await NotificationService.create_notification(
                recipient_id=owner_id,
                sender_id=sender_id,
                notification_type=NotificationTypeEnum.LIKE,
                video_id=video_id,
                message=f'{sender_name} liked your video "{title}"',
            )
        return is_liked

    @staticmethod
    async def toggle_comment_like(db: AsyncSession, user: User, comment_id: UUID) -> bool:
        if await db.get(Comment, comment_id) is None:
            raise NotFoundError("Comment")
        return await LikeService._toggle(db, user, "comment_id", comment_id)

    @staticmethod
    async def toggle_post_like(db: AsyncSession, user: User, post_id: UUID) -> bool:
        post = await db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Tweet")

        owner_id, preview = post.owner_id, post.preview()
        sender_id, sender_name = user.id, user.full_name
        is_liked = await LikeService._toggle(db, user, "post_id", post_id)
        if is_liked:
            await NotificationService.create_notification(
                recipient_id=owner_id,
                sender_id=sender_id,
                notification_type=NotificationTypeEnum.LIKE,
                message=f'{sender_name} liked your community post: "{preview}"',
            )
        return is_liked

    @staticmethod
    async def get_liked_videos(db: AsyncSession, user: User) -> List[LikedVideo]:
        """The caller's liked videos, most recently liked first"""
        result = await db.execute(
            select(Like)
            .where(Like.liked_by_id == user.id, Like.video_id.is_not(None))
            .options(joinedload(Like.video).options(with_owner_summary(Video.owner)))
            .order_by(Like.created_at.desc(), Like.id.desc())
        )
        return [
            LikedVideo(**to_video_with_owner(like.video).model_dump(), liked_at=like.created_at)
            for like in result.scalars().all()
            if like.video is not None
        ]

    @staticmethod
    async def get_video_likes(db: AsyncSession, video_id: UUID) -> List[VideoLiker]:
        """Accounts that liked a video, newest first"""
        result = await db.execute(
            select(Like)
            .where(Like.video_id == video_id)
            .options(with_owner_summary(Like.liked_by))
            .order_by(Like.created_at.desc(), Like.id.desc())
        )
        return [
            VideoLiker(
                id=like.id,
                user=OwnerSummary.model_validate(like.liked_by),
                created_at=like.created_at,
            )
            for like in result.scalars().all()
        ]
