"""
Comment service for video and post comments
"""

from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.exceptions import ForbiddenError, NotFoundError
from videotube.models.comment import Comment
from videotube.models.notification import NotificationTypeEnum
from videotube.models.post import Post
from videotube.models.user import User
from videotube.models.video import Video
from videotube.schemas.comment import CommentResponse
from videotube.schemas.common import OwnerSummary, Page
from videotube.services.cascade_service import CascadeService
from videotube.services.notification_service import NotificationService
from videotube.services.pagination import PageParams, paginate
from videotube.services.queries import comment_likes_count, with_owner_summary

logger = structlog.get_logger()


def to_comment_response(comment: Comment, likes_count: int = 0) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        content=comment.content,
        video_id=comment.video_id,
        post_id=comment.post_id,
        owner=OwnerSummary.model_validate(comment.owner) if comment.owner else None,
        likes_count=likes_count,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


class CommentService:
    """Service for managing comments"""

    @staticmethod
    async def _get_parent(db: AsyncSession, model, parent_id: UUID, resource: str):
        parent = await db.get(model, parent_id)
        if parent is None:
            raise NotFoundError(resource)
        return parent

    @staticmethod
    async def _list(db: AsyncSession, parent_filter, params: PageParams) -> Page:
        statement = (
            select(Comment, comment_likes_count())
            .where(parent_filter)
            .options(with_owner_summary(Comment.owner))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        count_statement = select(func.count(Comment.id)).where(parent_filter)
        return await paginate(
            db, statement, count_statement, params,
            lambda row: to_comment_response(row[0], row[1])
        )

    @staticmethod
    async def get_video_comments(db: AsyncSession, video_id: UUID, params: PageParams) -> Page:
        """Comments on a video, newest first, with owner and like count"""
        await CommentService._get_parent(db, Video, video_id, "Video")
        return await CommentService._list(db, Comment.video_id == video_id, params)

    @staticmethod
    async def get_post_comments(db: AsyncSession, post_id: UUID, params: PageParams) -> Page:
        await CommentService._get_parent(db, Post, post_id, "Tweet")
        return await CommentService._list(db, Comment.post_id == post_id, params)

    @staticmethod
    async def _create(db: AsyncSession, user: User, content: str, **parent) -> Comment:
        comment = Comment(owner_id=user.id, content=content, **parent)
        db.add(comment)
        await db.commit()
        return comment

    @staticmethod
    async def _load(db: AsyncSession, comment_id: UUID) -> CommentResponse:
        result = await db.execute(
            select(Comment, comment_likes_count())
            .where(Comment.id == comment_id)
            .options(with_owner_summary(Comment.owner))
        )
        comment, likes_count = result.one()
        return to_comment_response(comment, likes_count)

    @staticmethod
    async def add_video_comment(db: AsyncSession, user: User, video_id: UUID, content: str) -> CommentResponse:
        video = await CommentService._get_parent(db, Video, video_id, "Video")
        owner_id, title = video.owner_id, video.title
        sender_id, sender_name = user.id, user.full_name

        comment = await CommentService._create(db, user, content, video_id=video_id)
        await NotificationService.create_notification(
            recipient_id=owner_id,
            sender_id=sender_id,
            notification_type=NotificationTypeEnum.COMMENT,
            video_id=video_id,
            comment_id=comment.id,
            message=f'{sender_name} commented on your video "{title}"',
        )
        return await CommentService._load(db, comment.id)

    @staticmethod
    async def add_post_comment(db: AsyncSession, user: User, post_id: UUID, content: str) -> CommentResponse:
        post = await CommentService._get_parent(db, Post, post_id, "Tweet")
        owner_id, preview = post.owner_id, post.preview()
        sender_id, sender_name = user.id, user.full_name

        comment = await CommentService._create(db, user, content, post_id=post_id)
        await NotificationService.create_notification(
            recipient_id=owner_id,
            sender_id=sender_id,
            notification_type=NotificationTypeEnum.COMMENT,
            comment_id=comment.id,
            message=f'{sender_name} commented on your community post: "{preview}"',
        )
        return await CommentService._load(db, comment.id)

    @staticmethod
    async def _get_owned(db: AsyncSession, user: User, comment_id: UUID, action: str) -> Comment:
        comment = await db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment")
        if comment.owner_id != user.id:
            raise ForbiddenError(f"You are not authorized to {action} this comment")
        return comment

    @staticmethod
    async def update_comment(db: AsyncSession, user: User, comment_id: UUID, content: str) -> CommentResponse:
        comment = await CommentService._get_owned(db, user, comment_id, "update")
        comment.content = content
        await db.commit()
        return await CommentService._load(db, comment_id)

    @staticmethod
    async def delete_comment(db: AsyncSession, user: User, comment_id: UUID) -> None:
        """Delete a comment and the likes on it"""
        await CommentService._get_owned(db, user, comment_id, "delete")
        await CascadeService.purge_comments(db, select(Comment.id).where(Comment.id == comment_id))
        await db.commit()
        logger.info("Comment deleted", comment_id=str(comment_id))
