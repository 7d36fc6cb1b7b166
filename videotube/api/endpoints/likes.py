"""
Like toggle endpoints
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.deps import get_current_user
from videotube.db.database import get_db
from videotube.models.user import User
from videotube.schemas.like import LikeToggleResult
from videotube.services.like_service import LikeService
from videotube.utils.api_response import api_response

router = APIRouter()


def _toggle_message(is_liked: bool, target: str) -> str:
    return f"{target} {'liked' if is_liked else 'unliked'} successfully"


@router.post("/toggle/v/{video_id}")
async def toggle_video_like(
    video_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    is_liked = await LikeService.toggle_video_like(db, current_user, video_id)
    return api_response(LikeToggleResult(is_liked=is_liked), _toggle_message(is_liked, "Video"))


@router.post("/toggle/c/{comment_id}")
async def toggle_comment_like(
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    is_liked = await LikeService.toggle_comment_like(db, current_user, comment_id)
    return api_response(LikeToggleResult(is_liked=is_liked), _toggle_message(is_liked, "Comment"))


@router.post("/toggle/t/{post_id}")
async def toggle_tweet_like(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    is_liked = await LikeService.toggle_post_like(db, current_user, post_id)
    return api_response(LikeToggleResult(is_liked=is_liked), _toggle_message(is_liked, "Tweet"))


@router.get("/videos")
async def get_liked_videos(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    videos = await LikeService.get_liked_videos(db, current_user)
    return api_response(videos, "Liked videos fetched successfully")


@router.get("/v/{video_id}")
async def get_video_likes(video_id: UUID, db: AsyncSession = Depends(get_db)):
    likers = await LikeService.get_video_likes(db, video_id)
    return api_response(likers, "Video likes fetched successfully")
