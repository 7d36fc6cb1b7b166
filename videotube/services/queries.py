"""
Reusable query fragments: owner summary joins and derived like counts
"""

from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.post import Post
from videotube.models.subscription import Subscription
from videotube.models.user import User
from videotube.models.video import Video

SORTABLE_VIDEO_COLUMNS = {
    "createdAt": Video.created_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}


def with_owner_summary(relationship):
    """Join only the owner fields shown next to a resource"""
    return joinedload(relationship).load_only(
        User.id, User.username, User.full_name, User.avatar_url
    )


def video_likes_count():
    return (
        select(func.count(Like.id))
        .where(Like.video_id == Video.id)
        .correlate(Video)
        .scalar_subquery()
        .label("likes_count")
    )


def video_comments_count():
    return (
        select(func.count(Comment.id))
        .where(Comment.video_id == Video.id)
        .correlate(Video)
        .scalar_subquery()
        .label("comments_count")
    )


def comment_likes_count():
    return (
        select(func.count(Like.id))
        .where(Like.comment_id == Comment.id)
        .correlate(Comment)
        .scalar_subquery()
        .label("likes_count")
    )


def post_likes_count():
    return (
        select(func.count(Like.id))
        .where(Like.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
        .label("likes_count")
    )


def video_sort_order(sort_by, sort_type):
    """
    ORDER BY for video lists

    Without sortBy the newest videos come first; with sortBy the direction is
    ascending unless sortType is "desc". Unknown keys sort by creation time.
    """
    if not sort_by:
        return Video.created_at.desc(), Video.id.desc()
    column = SORTABLE_VIDEO_COLUMNS.get(sort_by, Video.created_at)
    direction = column.desc() if sort_type == "desc" else column.asc()
    return direction, Video.id.desc()


async def count_subscribers(db, channel_id) -> int:
    result = await db.execute(
        select(func.count(Subscription.id)).where(Subscription.channel_id == channel_id)
    )
    return result.scalar_one()
