"""
Custom exception classes and the standard error body
"""

from typing import Optional, List, Any
from fastapi import status


class ApiError(Exception):
    """Base exception for every expected API failure"""

    def __init__(
        self,
        message: str = "Something went wrong",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        errors: Optional[List[Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(self.message)


class BadRequestError(ApiError):
    """Missing or malformed input"""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, errors)


class UnauthorizedError(ApiError):
    """Missing or invalid credentials"""

    def __init__(self, message: str = "Unauthorized request"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class ForbiddenError(ApiError):
    """Caller is not allowed to act on the resource"""

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class NotFoundError(ApiError):
    """Exception raised when a resource is not found"""

    def __init__(self, resource: str = None, message: str = None):
        if message is None:
            message = f"{resource} not found" if resource else "Resource not found"
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictError(ApiError):
    """Duplicate unique value or already existing relation"""

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_409_CONFLICT)


class InternalServerError(ApiError):
    """Unexpected or infrastructure failure"""

    def __init__(self, message: str = "Something went wrong"):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class MediaUploadError(InternalServerError):
    """Exception raised when the object store rejects an upload"""

    def __init__(self, message: str = "Error while uploading file", filename: str = None):
        self.filename = filename
        super().__init__(message)


class EmailDeliveryError(InternalServerError):
    """Exception raised when a transactional email cannot be sent"""

    def __init__(self, message: str = "Failed to send email", recipient: str = None):
        self.recipient = recipient
        super().__init__(message)


def create_error_response(status_code: int, message: str, errors: Optional[List[Any]] = None) -> dict:
    """
    Create the standardized error body

    Args:
        status_code: HTTP status code
        message: Human readable message
        errors: Optional list of error details

    Returns:
        Dictionary shaped like every error response of the API
    """
    return {
        "statusCode": status_code,
        "message": message,
        "success": False,
        "errors": errors or []
    }
