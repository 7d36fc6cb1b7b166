"""
Video endpoints: feed, publishing, editing and deletion
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.deps import get_current_user, get_optional_user
from videotube.db.database import get_db
from videotube.models.user import User
from videotube.schemas.video import VideoResponse
from videotube.services.pagination import PageParams
from videotube.services.storage_service import StorageService, get_storage_service
from videotube.services.video_service import VideoService
from videotube.utils.api_response import api_response

router = APIRouter()


@router.get("")
async def get_all_videos(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    query: Optional[str] = Query(None, description="Search in title and description"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_type: Optional[str] = Query(None, alias="sortType"),
    user_id: Optional[UUID] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db)
):
    """
    Published videos, newest first unless sortBy/sortType say otherwise
    """
    videos = await VideoService.list_videos(
        db,
        PageParams.from_query(page, limit),
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        user_id=user_id,
    )
    return api_response(videos, "Videos fetched successfully")


@router.post("")
async def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    video = await VideoService.publish_video(db, storage, current_user, title, description, video_file, thumbnail)
    return api_response(VideoResponse.model_validate(video), "Video published successfully", status.HTTP_201_CREATED)


@router.get("/{video_id}")
async def get_video_by_id(
    video_id: UUID,
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    video = await VideoService.get_video_detail(db, video_id, viewer)
    return api_response(video, "Video fetched successfully")


@router.post("/{video_id}/view")
async def record_view(
    video_id: UUID,
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    await VideoService.record_view(db, video_id, viewer)
    return api_response({}, "View recorded")


@router.patch("/{video_id}")
async def update_video(
    video_id: UUID,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    video = await VideoService.update_video(db, storage, current_user, video_id, title, description, thumbnail)
    return api_response(VideoResponse.model_validate(video), "Video updated successfully")


@router.delete("/{video_id}")
async def delete_video(
    video_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    """Delete a video with its comments, likes, playlist entries and history entries"""
    await VideoService.delete_video(db, storage, current_user, video_id)
    return api_response({}, "Video deleted successfully")


@router.patch("/toggle/publish/{video_id}")
async def toggle_publish_status(
    video_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    video = await VideoService.toggle_publish_status(db, current_user, video_id)
    return api_response(
        {"isPublished": video.is_published},
        "Video publish status toggled successfully"
    )
