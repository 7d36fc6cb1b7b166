"""
Channel dashboard: aggregate stats and the owner's video list
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.user import User
from videotube.models.video import Video
from videotube.schemas.common import Page
from videotube.schemas.video import DashboardVideo, VideoResponse
from videotube.services.pagination import PageParams, paginate
from videotube.services.queries import (
    count_subscribers,
    video_comments_count,
    video_likes_count,
    video_sort_order,
)


class DashboardService:
    """Aggregates for the channel owner dashboard"""

    @staticmethod
    async def get_channel_stats(db: AsyncSession, user: User) -> dict:
        """
        Totals for the caller's channel

        Likes and comments are counted on the caller's videos only.
        """
        owned_videos = select(Video.id).where(Video.owner_id == user.id)

        video_stats = await db.execute(
            select(func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
            .where(Video.owner_id == user.id)
        )
        total_videos, total_views = video_stats.one()

        total_likes = (await db.execute(
            select(func.count(Like.id)).where(Like.video_id.in_(owned_videos))
        )).scalar_one()

        total_comments = (await db.execute(
            select(func.count(Comment.id)).where(Comment.video_id.in_(owned_videos))
        )).scalar_one()

        return {
            "totalVideos": total_videos,
            "totalViews": int(total_views),
            "totalSubscribers": await count_subscribers(db, user.id),
            "totalLikes": total_likes,
            "totalComments": total_comments,
        }

    @staticmethod
    async def get_channel_videos(
        db: AsyncSession,
        user: User,
        params: PageParams,
        sort_by: Optional[str] = None,
        sort_type: Optional[str] = None
    ) -> Page:
        """All of the caller's videos, published or not, with like and comment counts"""
        statement = (
            select(Video, video_likes_count(), video_comments_count())
            .where(Video.owner_id == user.id)
            .order_by(*video_sort_order(sort_by, sort_type))
        )
        count_statement = select(func.count(Video.id)).where(Video.owner_id == user.id)

        return await paginate(
            db, statement, count_statement, params,
            lambda row: DashboardVideo(
                **VideoResponse.model_validate(row[0]).model_dump(),
                likes_count=row[1],
                comments_count=row[2],
            )
        )
