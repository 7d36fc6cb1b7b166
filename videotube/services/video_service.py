"""
Video service: feed, publishing, editing, views and cascade deletion
"""

from typing import Optional
from uuid import UUID

import structlog
from fastapi import UploadFile
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.exceptions import (
    ApiError,
    BadRequestError,
    ForbiddenError,
    InternalServerError,
    NotFoundError,
)
from videotube.db.unit_of_work import UnitOfWork
from videotube.models.like import Like
from videotube.models.user import User
from videotube.models.video import Video
from videotube.schemas.common import OwnerSummary, Page
from videotube.schemas.video import VideoDetail, VideoResponse, VideoWithOwner
from videotube.services.account_service import AccountService
from videotube.services.cascade_service import CascadeService
from videotube.services.pagination import PageParams, paginate
from videotube.services.queries import (
    count_subscribers,
    video_likes_count,
    video_sort_order,
    with_owner_summary,
)
from videotube.services.storage_service import StorageService

logger = structlog.get_logger()


def to_video_with_owner(video: Video) -> VideoWithOwner:
    return VideoWithOwner(
        **VideoResponse.model_validate(video).model_dump(),
        owner=OwnerSummary.model_validate(video.owner) if video.owner else None,
    )


class VideoService:
    """Service for video operations"""

    @staticmethod
    async def get_video_or_404(db: AsyncSession, video_id: UUID) -> Video:
        video = await db.get(Video, video_id)
        if video is None:
            raise NotFoundError("Video")
        return video

    @staticmethod
    def _ensure_owner(video: Video, user: User, action: str) -> None:
        if video.owner_id != user.id:
            raise ForbiddenError(f"You are not authorized to {action} this video")

    @staticmethod
    async def list_videos(
        db: AsyncSession,
        params: PageParams,
        query: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_type: Optional[str] = None,
        user_id: Optional[UUID] = None
    ) -> Page:
        """
        Published videos with owner summary

        Args:
            db: Database session
            params: Page number and size
            query: Case-insensitive search over title and description
            sort_by: createdAt, views, duration or title
            sort_type: asc or desc
            user_id: Only videos of this channel

        Returns:
            Paginated list of videos
        """
        filters = [Video.is_published.is_(True)]

        if query and query.strip():
            pattern = f"%{query.strip()}%"
            filters.append(or_(Video.title.ilike(pattern), Video.description.ilike(pattern)))

        if user_id is not None:
            if await db.get(User, user_id) is None:
                raise NotFoundError("User")
            filters.append(Video.owner_id == user_id)

        statement = (
            select(Video)
            .where(*filters)
            .options(with_owner_summary(Video.owner))
            .order_by(*video_sort_order(sort_by, sort_type))
        )
        count_statement = select(func.count(Video.id)).where(*filters)

        return await paginate(db, statement, count_statement, params, lambda row: to_video_with_owner(row[0]))

    @staticmethod
    async def publish_video(
        db: AsyncSession,
        storage: StorageService,
        user: User,
        title: Optional[str],
        description: Optional[str],
        video_file: Optional[UploadFile],
        thumbnail: Optional[UploadFile]
    ) -> Video:
        if not title or not title.strip() or not description or not description.strip():
            raise BadRequestError("Title and description are required")
        if video_file is None or not video_file.filename:
            raise BadRequestError("Video file is required")
        if thumbnail is None or not thumbnail.filename:
            raise BadRequestError("Thumbnail is required")

        video_media = await storage.upload(video_file, "videos", "video")
        try:
            thumbnail_media = await storage.upload(thumbnail, "thumbnails", "image")
        except ApiError:
            await storage.delete(video_media.public_id)
            raise

        video = Video(
            owner_id=user.id,
            title=title.strip(),
            description=description.strip(),
            video_url=video_media.url,
            video_public_id=video_media.public_id,
            thumbnail_url=thumbnail_media.url,
            thumbnail_public_id=thumbnail_media.public_id,
            duration=video_media.duration,
            is_published=True,
        )
        db.add(video)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            await storage.delete_many([video_media.public_id, thumbnail_media.public_id])
            raise

        logger.info("Video published", video_id=str(video.id), owner_id=str(user.id))
        return video

    @staticmethod
    async def get_video_detail(db: AsyncSession, video_id: UUID, viewer: Optional[User]) -> VideoDetail:
        """Published video with owner, like and subscriber counts and the viewer's state"""
        result = await db.execute(
            select(Video, video_likes_count())
            .where(Video.id == video_id, Video.is_published.is_(True))
            .options(with_owner_summary(Video.owner))
        )
        row = result.first()
        if row is None:
            raise NotFoundError("Video")

        video, likes_count = row
        is_liked = False
        is_subscribed = False
        if viewer is not None:
            liked = await db.execute(
                select(Like.id).where(Like.video_id == video.id, Like.liked_by_id == viewer.id)
            )
            is_liked = liked.first() is not None
            is_subscribed = await AccountService.is_subscribed(db, viewer.id, video.owner_id)

        return VideoDetail(
            **to_video_with_owner(video).model_dump(),
            likes_count=likes_count,
            subscribers_count=await count_subscribers(db, video.owner_id),
            is_liked=is_liked,
            is_subscribed=is_subscribed,
        )

    @staticmethod
    async def record_view(db: AsyncSession, video_id: UUID, viewer: Optional[User]) -> None:
        """Increment the view counter and move the video to the front of the viewer's history"""
        await VideoService.get_video_or_404(db, video_id)

        await db.execute(
            update(Video)
            .where(Video.id == video_id)
            .values(views=Video.views + 1)
            .execution_options(synchronize_session=False)
        )
        if viewer is not None:
            await AccountService.record_watch(db, viewer.id, video_id)
        await db.commit()

    @staticmethod
    async def update_video(
        db: AsyncSession,
        storage: StorageService,
        user: User,
        video_id: UUID,
        title: Optional[str],
        description: Optional[str],
        thumbnail: Optional[UploadFile]
    ) -> Video:
        has_thumbnail = thumbnail is not None and bool(thumbnail.filename)
        if not (title and title.strip()) and not (description and description.strip()) and not has_thumbnail:
            raise BadRequestError("At least one field (title, description, or thumbnail) is required")

        video = await VideoService.get_video_or_404(db, video_id)
        VideoService._ensure_owner(video, user, "update")

        media = None
        old_thumbnail_id = None
        if has_thumbnail:
            media = await storage.upload(thumbnail, "thumbnails", "image")
            old_thumbnail_id = video.thumbnail_public_id
            video.thumbnail_url = media.url
            video.thumbnail_public_id = media.public_id

        if title and title.strip():
            video.title = title.strip()
        if description and description.strip():
            video.description = description.strip()

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            if media is not None:
                await storage.delete(media.public_id)
            raise

        await storage.delete(old_thumbnail_id)
        return video

    @staticmethod
    async def delete_video(db: AsyncSession, storage: StorageService, user: User, video_id: UUID) -> None:
        """
        Delete a video with its comments, likes, playlist and watch history entries

        Stored media is removed first on a best-effort basis; the database part
        is one unit of work and a failure surfaces as a 500.
        """
        video = await VideoService.get_video_or_404(db, video_id)
        VideoService._ensure_owner(video, user, "delete")

        await storage.delete_many(video.media_public_ids())

        try:
            async with UnitOfWork(db, name="delete_video"):
                await CascadeService.purge_videos(db, select(Video.id).where(Video.id == video_id))
        except ApiError:
            raise
        except Exception as e:
            logger.error("Video deletion failed", video_id=str(video_id), error=str(e))
            raise InternalServerError(str(e) or "Failed to delete video and associated data")

        logger.info("Video deleted", video_id=str(video_id), owner_id=str(user.id))

    @staticmethod
    async def toggle_publish_status(db: AsyncSession, user: User, video_id: UUID) -> Video:
        video = await VideoService.get_video_or_404(db, video_id)
        VideoService._ensure_owner(video, user, "toggle publish status of")

        video.is_published = not video.is_published
        await db.commit()
        return video
