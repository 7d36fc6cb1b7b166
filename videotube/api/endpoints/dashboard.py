"""
Channel dashboard endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.deps import get_current_user
from videotube.db.database import get_db
from videotube.models.user import User
from videotube.services.dashboard_service import DashboardService
from videotube.services.pagination import PageParams
from videotube.utils.api_response import api_response

router = APIRouter()


@router.get("/stats")
async def get_channel_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    stats = await DashboardService.get_channel_stats(db, current_user)
    return api_response(stats, "Channel stats fetched successfully")


@router.get("/videos")
async def get_channel_videos(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_type: Optional[str] = Query(None, alias="sortType"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    videos = await DashboardService.get_channel_videos(
        db, current_user, PageParams.from_query(page, limit), sort_by, sort_type
    )
    return api_response(videos, "Channel videos fetched successfully")
