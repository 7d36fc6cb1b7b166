"""
Community post ("tweet") service
"""

from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.exceptions import ForbiddenError, NotFoundError
from videotube.models.post import Post
from videotube.models.user import User
from videotube.schemas.common import OwnerSummary, Page
from videotube.schemas.post import PostResponse
from videotube.services.cascade_service import CascadeService
from videotube.services.pagination import PageParams, paginate
from videotube.services.queries import post_likes_count, with_owner_summary

logger = structlog.get_logger()


def to_post_response(post: Post, likes_count: int = 0) -> PostResponse:
    return PostResponse(
        id=post.id,
        content=post.content,
        owner=OwnerSummary.model_validate(post.owner) if post.owner else None,
        likes_count=likes_count,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


class PostService:
    """Service for community posts"""

    @staticmethod
    async def _load(db: AsyncSession, post_id: UUID) -> PostResponse:
        result = await db.execute(
            select(Post, post_likes_count())
            .where(Post.id == post_id)
            .options(with_owner_summary(Post.owner))
        )
        post, likes_count = result.one()
        return to_post_response(post, likes_count)

    @staticmethod
    async def create_post(db: AsyncSession, user: User, content: str) -> PostResponse:
        post = Post(owner_id=user.id, content=content)
        db.add(post)
        await db.commit()
        return await PostService._load(db, post.id)

    @staticmethod
    async def get_user_posts(db: AsyncSession, user_id: UUID, params: PageParams) -> Page:
        """A channel's posts, newest first"""
        if await db.get(User, user_id) is None:
            raise NotFoundError("User")

        statement = (
            select(Post, post_likes_count())
            .where(Post.owner_id == user_id)
            .options(with_owner_summary(Post.owner))
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        count_statement = select(func.count(Post.id)).where(Post.owner_id == user_id)
        return await paginate(
            db, statement, count_statement, params,
            lambda row: to_post_response(row[0], row[1])
        )

    @staticmethod
    async def _get_owned(db: AsyncSession, user: User, post_id: UUID, action: str) -> Post:
        post = await db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Tweet")
        if post.owner_id != user.id:
            raise ForbiddenError(f"You are not authorized to {action} this tweet")
        return post

    @staticmethod
    async def update_post(db: AsyncSession, user: User, post_id: UUID, content: str) -> PostResponse:
        post = await PostService._get_owned(db, user, post_id, "update")
        post.content = content
        await db.commit()
        return await PostService._load(db, post_id)

    @staticmethod
    async def delete_post(db: AsyncSession, user: User, post_id: UUID) -> None:
        """Delete a post with its comments and every like on either"""
        await PostService._get_owned(db, user, post_id, "delete")
        await CascadeService.purge_posts(db, select(Post.id).where(Post.id == post_id))
        await db.commit()
        logger.info("Tweet deleted", post_id=str(post_id))
