"""
Account endpoints: registration, verification, sessions, profile and deletion
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.config import settings
from videotube.core.deps import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    get_current_user,
    get_optional_user,
)
from videotube.db.database import get_db
from videotube.models.user import User
from videotube.schemas.user import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    ResetPasswordRequest,
    TokenPair,
    UpdateAccountRequest,
    UserResponse,
)
from videotube.services.account_service import AccountService
from videotube.services.email_service import EmailService, get_email_service
from videotube.services.storage_service import StorageService, get_storage_service
from videotube.utils.api_response import api_response

router = APIRouter()


def _set_auth_cookies(response: JSONResponse, access_token: str, refresh_token: str) -> JSONResponse:
    secure = settings.ENVIRONMENT == "production"
    response.set_cookie(ACCESS_TOKEN_COOKIE, access_token, httponly=True, secure=secure, samesite="lax")
    response.set_cookie(REFRESH_TOKEN_COOKIE, refresh_token, httponly=True, secure=secure, samesite="lax")
    return response


def _clear_auth_cookies(response: JSONResponse) -> JSONResponse:
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)
    return response


@router.post("/register")
async def register(
    full_name: Optional[str] = Form(None, alias="fullName"),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    mailer: EmailService = Depends(get_email_service)
):
    """
    Start a registration

    The account is only created once the emailed verification link is used.
    """
    await AccountService.register(
        db, storage, mailer,
        full_name=full_name,
        email=email,
        username=username,
        password=password,
        avatar=avatar,
        cover_image=cover_image,
    )
    return api_response(
        None,
        "Verification email sent. Please verify to complete registration.",
        status.HTTP_201_CREATED
    )


@router.get("/verify-email/{token}")
async def verify_email(token: str, db: AsyncSession = Depends(get_db)):
    user = await AccountService.verify_email(db, token)
    return api_response(UserResponse.model_validate(user), "Email verified successfully. You can now log in.")


@router.post("/login")
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    user, access_token, refresh_token = await AccountService.login(
        db, credentials.email, credentials.username, credentials.password
    )
    response = api_response(
        LoginResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        ),
        "User logged in successfully"
    )
    return _set_auth_cookies(response, access_token, refresh_token)


@router.post("/logout")
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await AccountService.logout(db, current_user)
    return _clear_auth_cookies(api_response({}, "User logged out"))


@router.post("/refresh-token")
async def refresh_access_token(
    request: Request,
    payload: Optional[RefreshTokenRequest] = Body(None),
    db: AsyncSession = Depends(get_db)
):
    incoming = request.cookies.get(REFRESH_TOKEN_COOKIE) or (payload.refresh_token if payload else None)
    access_token, refresh_token = await AccountService.refresh_tokens(db, incoming)
    response = api_response(
        TokenPair(access_token=access_token, refresh_token=refresh_token),
        "Access token refreshed"
    )
    return _set_auth_cookies(response, access_token, refresh_token)


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await AccountService.change_password(db, current_user, payload.old_password, payload.new_password)
    return api_response({}, "Password changed successfully")


@router.post("/forgot-password")
async def forgot_password(
    payload: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
    mailer: EmailService = Depends(get_email_service)
):
    await AccountService.forgot_password(db, mailer, payload.email)
    return api_response({}, "If an account with that email exists, a password reset link has been sent")


@router.post("/reset-password/{token}")
async def reset_password(
    token: str,
    payload: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    await AccountService.reset_password(db, token, payload.password)
    return api_response({}, "Password reset successfully")


@router.get("/current-user")
async def get_current_account(current_user: User = Depends(get_current_user)):
    return api_response(UserResponse.model_validate(current_user), "User fetched successfully")


@router.patch("/update-account")
async def update_account(
    payload: UpdateAccountRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    user = await AccountService.update_account(db, current_user, payload.full_name, payload.email)
    return api_response(UserResponse.model_validate(user), "Account details updated successfully")


@router.patch("/avatar")
async def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    user = await AccountService.update_avatar(db, storage, current_user, avatar)
    return api_response(UserResponse.model_validate(user), "Avatar image updated successfully")


@router.patch("/cover-image")
async def update_cover_image(
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    user = await AccountService.update_cover_image(db, storage, current_user, cover_image)
    return api_response(UserResponse.model_validate(user), "Cover image updated successfully")


@router.get("/c/{username}")
async def get_channel_profile(
    username: str,
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    profile = await AccountService.get_channel_profile(db, username, viewer)
    return api_response(profile, "User channel fetched successfully")


@router.get("/history")
async def get_watch_history(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    history = await AccountService.get_watch_history(db, current_user)
    return api_response(history, "Watch history fetched successfully")


@router.delete("/history/{video_id}")
async def remove_from_watch_history(
    video_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await AccountService.remove_from_watch_history(db, current_user, video_id)
    return api_response({}, "Video removed from watch history")


@router.delete("/delete-account")
async def delete_account(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    """Delete the caller's account together with everything it owns or references"""
    await AccountService.delete_account(db, storage, current_user)
    return _clear_auth_cookies(api_response({}, "User account deleted successfully"))
