"""
Healthcheck endpoint
"""

from fastapi import APIRouter

from videotube.utils.api_response import api_response

router = APIRouter()


@router.get("")
async def healthcheck():
    return api_response({"status": "OK"}, "Health check passed")
