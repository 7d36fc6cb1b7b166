"""
Playlist service
"""

from typing import List
from uuid import UUID

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from videotube.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from videotube.models.playlist import Playlist, PlaylistVideo
from videotube.models.user import User
from videotube.models.video import Video
from videotube.schemas.common import OwnerSummary
from videotube.schemas.playlist import PlaylistResponse
from videotube.services.queries import with_owner_summary
from videotube.services.video_service import to_video_with_owner

logger = structlog.get_logger()


def _playlist_options():
    return (
        with_owner_summary(Playlist.owner),
        selectinload(Playlist.entries)
        .joinedload(PlaylistVideo.video)
        .options(with_owner_summary(Video.owner)),
    )


def to_playlist_response(playlist: Playlist) -> PlaylistResponse:
    videos = [to_video_with_owner(entry.video) for entry in playlist.entries if entry.video is not None]
    return PlaylistResponse(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner=OwnerSummary.model_validate(playlist.owner) if playlist.owner else None,
        videos=videos,
        total_videos=len(videos),
        total_views=sum(video.views for video in videos),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


class PlaylistService:
    """Service for playlists and their ordered videos"""

    @staticmethod
    async def _load(db: AsyncSession, playlist_id: UUID) -> Playlist:
        result = await db.execute(
            select(Playlist)
            .where(Playlist.id == playlist_id)
            .options(*_playlist_options())
            .execution_options(populate_existing=True)
        )
        playlist = result.scalar_one_or_none()
        if playlist is None:
            raise NotFoundError("Playlist")
        return playlist

    @staticmethod
    async def _get_owned(db: AsyncSession, user: User, playlist_id: UUID, action: str) -> Playlist:
        playlist = await db.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist")
        if playlist.owner_id != user.id:
            raise ForbiddenError(f"You are not authorized to {action} this playlist")
        return playlist

    @staticmethod
    async def create_playlist(db: AsyncSession, user: User, name: str, description: str) -> PlaylistResponse:
        playlist = Playlist(owner_id=user.id, name=name, description=description or "")
        db.add(playlist)
        await db.commit()
        return to_playlist_response(await PlaylistService._load(db, playlist.id))

    @staticmethod
    async def get_playlist(db: AsyncSession, playlist_id: UUID) -> PlaylistResponse:
        """Playlist with its videos in order, totalVideos and totalViews"""
        return to_playlist_response(await PlaylistService._load(db, playlist_id))

    @staticmethod
    async def get_user_playlists(db: AsyncSession, user_id: UUID) -> List[PlaylistResponse]:
        if await db.get(User, user_id) is None:
            raise NotFoundError("User")

        result = await db.execute(
            select(Playlist)
            .where(Playlist.owner_id == user_id)
            .options(*_playlist_options())
            .order_by(Playlist.created_at.desc(), Playlist.id.desc())
        )
        return [to_playlist_response(playlist) for playlist in result.scalars().unique().all()]

    @staticmethod
    async def update_playlist(
        db: AsyncSession,
        user: User,
        playlist_id: UUID,
        name: str = None,
        description: str = None
    ) -> PlaylistResponse:
        if not (name and name.strip()) and description is None:
            raise BadRequestError("Name or description is required")

        playlist = await PlaylistService._get_owned(db, user, playlist_id, "update")
        if name and name.strip():
            playlist.name = name.strip()
        if description is not None:
            playlist.description = description
        await db.commit()
        return to_playlist_response(await PlaylistService._load(db, playlist_id))

    @staticmethod
    async def delete_playlist(db: AsyncSession, user: User, playlist_id: UUID) -> None:
        await PlaylistService._get_owned(db, user, playlist_id, "delete")
        await db.execute(delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist_id))
        await db.execute(delete(Playlist).where(Playlist.id == playlist_id))
        await db.commit()

    @staticmethod
    async def add_video(db: AsyncSession, user: User, playlist_id: UUID, video_id: UUID) -> PlaylistResponse:
        """Append a video at the end of the playlist"""
        await PlaylistService._get_owned(db, user, playlist_id, "modify")
        if await db.get(Video, video_id) is None:
            raise NotFoundError("Video")

        existing = await db.execute(
            select(PlaylistVideo.id).where(
                PlaylistVideo.playlist_id == playlist_id,
                PlaylistVideo.video_id == video_id
            )
        )
        if existing.first() is not None:
            raise ConflictError("Video already exists in playlist")

        result = await db.execute(
            select(func.max(PlaylistVideo.position)).where(PlaylistVideo.playlist_id == playlist_id)
        )
        last_position = result.scalar_one()
        position = 0 if last_position is None else last_position + 1

        db.add(PlaylistVideo(playlist_id=playlist_id, video_id=video_id, position=position))
        await db.commit()
        return to_playlist_response(await PlaylistService._load(db, playlist_id))

    @staticmethod
    async def remove_video(db: AsyncSession, user: User, playlist_id: UUID, video_id: UUID) -> PlaylistResponse:
        await PlaylistService._get_owned(db, user, playlist_id, "modify")
        result = await db.execute(
            delete(PlaylistVideo).where(
                PlaylistVideo.playlist_id == playlist_id,
                PlaylistVideo.video_id == video_id
            )
        )
        if result.rowcount == 0:
            raise NotFoundError(message="Video not found in playlist")
        await db.commit()
        return to_playlist_response(await PlaylistService._load(db, playlist_id))
