"""
Playlist endpoints
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.deps import get_current_user
from videotube.db.database import get_db
from videotube.models.user import User
from videotube.schemas.playlist import PlaylistCreate, PlaylistUpdate
from videotube.services.playlist_service import PlaylistService
from videotube.utils.api_response import api_response

router = APIRouter()


@router.post("")
async def create_playlist(
    payload: PlaylistCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    playlist = await PlaylistService.create_playlist(db, current_user, payload.name, payload.description)
    return api_response(playlist, "Playlist created successfully", status.HTTP_201_CREATED)


@router.get("/user/{user_id}")
async def get_user_playlists(user_id: UUID, db: AsyncSession = Depends(get_db)):
    playlists = await PlaylistService.get_user_playlists(db, user_id)
    return api_response(playlists, "User playlists fetched successfully")


@router.get("/{playlist_id}")
async def get_playlist_by_id(playlist_id: UUID, db: AsyncSession = Depends(get_db)):
    playlist = await PlaylistService.get_playlist(db, playlist_id)
    return api_response(playlist, "Playlist fetched successfully")


@router.patch("/add/{video_id}/{playlist_id}")
async def add_video_to_playlist(
    video_id: UUID,
    playlist_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    playlist = await PlaylistService.add_video(db, current_user, playlist_id, video_id)
    return api_response(playlist, "Video added to playlist successfully")


@router.patch("/remove/{video_id}/{playlist_id}")
async def remove_video_from_playlist(
    video_id: UUID,
    playlist_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    playlist = await PlaylistService.remove_video(db, current_user, playlist_id, video_id)
    return api_response(playlist, "Video removed from playlist successfully")


@router.patch("/{playlist_id}")
async def update_playlist(
    playlist_id: UUID,
    payload: PlaylistUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    playlist = await PlaylistService.update_playlist(
        db, current_user, playlist_id, payload.name, payload.description
    )
    return api_response(playlist, "Playlist updated successfully")


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await PlaylistService.delete_playlist(db, current_user, playlist_id)
    return api_response({}, "Playlist deleted successfully")
