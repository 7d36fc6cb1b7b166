"""
Community post ("tweet") endpoints
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.deps import get_current_user
from videotube.db.database import get_db
from videotube.models.user import User
from videotube.schemas.post import PostCreate
from videotube.services.pagination import PageParams
from videotube.services.post_service import PostService
from videotube.utils.api_response import api_response

router = APIRouter()


@router.post("")
async def create_tweet(
    payload: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    post = await PostService.create_post(db, current_user, payload.content)
    return api_response(post, "Tweet created successfully", status.HTTP_201_CREATED)


@router.get("/user/{user_id}")
async def get_user_tweets(
    user_id: UUID,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    posts = await PostService.get_user_posts(db, user_id, PageParams.from_query(page, limit))
    return api_response(posts, "Tweets fetched successfully")


@router.patch("/{post_id}")
async def update_tweet(
    post_id: UUID,
    payload: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    post = await PostService.update_post(db, current_user, post_id, payload.content)
    return api_response(post, "Tweet updated successfully")


@router.delete("/{post_id}")
async def delete_tweet(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await PostService.delete_post(db, current_user, post_id)
    return api_response({}, "Tweet deleted successfully")
