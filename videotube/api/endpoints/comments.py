"""
Comment endpoints for videos and community posts
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.deps import get_current_user
from videotube.db.database import get_db
from videotube.models.user import User
from videotube.schemas.comment import CommentCreate
from videotube.services.comment_service import CommentService
from videotube.services.pagination import PageParams
from videotube.utils.api_response import api_response

router = APIRouter()


@router.get("/{video_id}")
async def get_video_comments(
    video_id: UUID,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    comments = await CommentService.get_video_comments(db, video_id, PageParams.from_query(page, limit))
    return api_response(comments, "Comments fetched successfully")


@router.post("/{video_id}")
async def add_video_comment(
    video_id: UUID,
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    comment = await CommentService.add_video_comment(db, current_user, video_id, payload.content)
    return api_response(comment, "Comment added successfully", status.HTTP_201_CREATED)


@router.get("/t/{post_id}")
async def get_tweet_comments(
    post_id: UUID,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    comments = await CommentService.get_post_comments(db, post_id, PageParams.from_query(page, limit))
    return api_response(comments, "Comments fetched successfully")


@router.post("/t/{post_id}")
async def add_tweet_comment(
    post_id: UUID,
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    comment = await CommentService.add_post_comment(db, current_user, post_id, payload.content)
    return api_response(comment, "Comment added successfully", status.HTTP_201_CREATED)


@router.patch("/c/{comment_id}")
async def update_comment(
    comment_id: UUID,
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    comment = await CommentService.update_comment(db, current_user, comment_id, payload.content)
    return api_response(comment, "Comment updated successfully")


@router.delete("/c/{comment_id}")
async def delete_comment(
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await CommentService.delete_comment(db, current_user, comment_id)
    return api_response({}, "Comment deleted successfully")
