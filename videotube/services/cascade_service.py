"""
Cascade deletion of videos, posts, comments and whole accounts

Every method only issues statements on the given session; the caller owns the
transaction (see UnitOfWork) so a failure in any step rolls all of them back.
Ids are passed as select statements so the set of affected rows is resolved by
the database while the referenced rows still exist.
"""

from uuid import UUID

import structlog
from sqlalchemy import Select, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.notification import Notification
from videotube.models.playlist import Playlist, PlaylistVideo
from videotube.models.post import Post
from videotube.models.subscription import Subscription
from videotube.models.user import User
from videotube.models.video import Video
from videotube.models.watch_history import WatchHistoryEntry

logger = structlog.get_logger()


class CascadeService:
    """Set-based cleanup of rows that would otherwise dangle"""

    @staticmethod
    async def purge_comments(db: AsyncSession, comment_ids: Select) -> None:
        """Delete comments together with their likes; notifications keep existing without the link"""
        await db.execute(delete(Like).where(Like.comment_id.in_(comment_ids)))
        await db.execute(
            update(Notification)
            .where(Notification.comment_id.in_(comment_ids))
            .values(comment_id=None)
        )
        await db.execute(delete(Comment).where(Comment.id.in_(comment_ids)))

    @staticmethod
    async def purge_videos(db: AsyncSession, video_ids: Select) -> None:
        """
        Delete videos and everything that references them

        Removes comments on the videos (and likes on those comments), likes on
        the videos, playlist entries and watch history entries, then the videos.
        """
        await CascadeService.purge_comments(
            db, select(Comment.id).where(Comment.video_id.in_(video_ids))
        )
        await db.execute(delete(Like).where(Like.video_id.in_(video_ids)))
        await db.execute(
            update(Notification)
            .where(Notification.video_id.in_(video_ids))
            .values(video_id=None)
        )
        await db.execute(delete(PlaylistVideo).where(PlaylistVideo.video_id.in_(video_ids)))
        await db.execute(delete(WatchHistoryEntry).where(WatchHistoryEntry.video_id.in_(video_ids)))
        await db.execute(delete(Video).where(Video.id.in_(video_ids)))

    @staticmethod
    async def purge_posts(db: AsyncSession, post_ids: Select) -> None:
        """Delete posts with their comments and all likes on both"""
        await CascadeService.purge_comments(
            db, select(Comment.id).where(Comment.post_id.in_(post_ids))
        )
        await db.execute(delete(Like).where(Like.post_id.in_(post_ids)))
        await db.execute(delete(Post).where(Post.id.in_(post_ids)))

    @staticmethod
    async def purge_playlists(db: AsyncSession, owner_id: UUID) -> None:
        owned = select(Playlist.id).where(Playlist.owner_id == owner_id)
        await db.execute(delete(PlaylistVideo).where(PlaylistVideo.playlist_id.in_(owned)))
        await db.execute(delete(Playlist).where(Playlist.owner_id == owner_id))

    @staticmethod
    async def purge_subscriptions(db: AsyncSession, user_id: UUID) -> None:
        await db.execute(
            delete(Subscription).where(
                or_(Subscription.subscriber_id == user_id, Subscription.channel_id == user_id)
            )
        )

    @staticmethod
    async def purge_account(db: AsyncSession, user_id: UUID) -> None:
        """
        Delete an account and all data referencing it

        The account row goes last so a failure part way leaves it in place.
        """
        await CascadeService.purge_videos(db, select(Video.id).where(Video.owner_id == user_id))
        await CascadeService.purge_posts(db, select(Post.id).where(Post.owner_id == user_id))
        await CascadeService.purge_comments(db, select(Comment.id).where(Comment.owner_id == user_id))
        await db.execute(delete(Like).where(Like.liked_by_id == user_id))
        await CascadeService.purge_playlists(db, user_id)
        await db.execute(delete(WatchHistoryEntry).where(WatchHistoryEntry.user_id == user_id))
        await CascadeService.purge_subscriptions(db, user_id)
        await db.execute(
            delete(Notification).where(
                or_(Notification.recipient_id == user_id, Notification.sender_id == user_id)
            )
        )
        await db.execute(delete(User).where(User.id == user_id))
        logger.info("Account records purged", user_id=str(user_id))
