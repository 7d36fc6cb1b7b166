"""
Standard success envelope shared by every endpoint
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    data: Any = None,
    message: str = "Success",
    status_code: int = status.HTTP_200_OK
) -> JSONResponse:
    """
    Wrap a payload as {statusCode, data, message, success}

    Args:
        data: Payload (pydantic models are dumped with their camelCase aliases)
        message: Human readable message
        status_code: HTTP status code of the response

    Returns:
        JSONResponse ready to be returned by a route
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "data": jsonable_encoder(data, by_alias=True),
            "message": message,
            "success": status_code < 400,
        }
    )
