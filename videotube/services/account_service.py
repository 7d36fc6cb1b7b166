"""
Account service: registration, email verification, sessions, profile and deletion
"""

from datetime import datetime, timedelta
from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from email_validator import EmailNotValidError, validate_email
from fastapi import UploadFile
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from videotube.core.config import settings
from videotube.core.exceptions import (
    ApiError,
    BadRequestError,
    ConflictError,
    EmailDeliveryError,
    ForbiddenError,
    InternalServerError,
    NotFoundError,
    UnauthorizedError,
)
from videotube.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    generate_token,
    get_password_hash,
    hash_token,
    verify_password,
)
from videotube.db.unit_of_work import UnitOfWork
from videotube.models.pending_user import PendingUser
from videotube.models.subscription import Subscription
from videotube.models.user import User
from videotube.models.video import Video
from videotube.models.watch_history import WatchHistoryEntry
from videotube.schemas.common import OwnerSummary
from videotube.schemas.user import ChannelProfile, UserResponse, WatchHistoryItem
from videotube.services.cascade_service import CascadeService
from videotube.services.email_service import EmailService
from videotube.services.storage_service import StorageService
from videotube.utils.password_validation import is_blocked_email_domain, validate_password_strength

logger = structlog.get_logger()

PASSWORD_RULES_MESSAGE = (
    "Password must be at least 8 characters long and include uppercase, "
    "lowercase, number, and special character"
)


class AccountService:
    """Service for account lifecycle operations"""

    @staticmethod
    async def _find_user(db: AsyncSession, email: Optional[str], username: Optional[str]) -> Optional[User]:
        conditions = []
        if email:
            conditions.append(User.email == email)
        if username:
            conditions.append(User.username == username)
        if not conditions:
            return None
        result = await db.execute(select(User).where(or_(*conditions)).limit(1))
        return result.scalar_one_or_none()

    @staticmethod
    async def _find_pending(db: AsyncSession, email: Optional[str], username: Optional[str]) -> Optional[PendingUser]:
        """Unexpired pending registration holding the email or username"""
        conditions = []
        if email:
            conditions.append(PendingUser.email == email)
        if username:
            conditions.append(PendingUser.username == username)
        if not conditions:
            return None
        result = await db.execute(
            select(PendingUser)
            .where(or_(*conditions), PendingUser.created_at >= PendingUser.retention_cutoff())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def register(
        db: AsyncSession,
        storage: StorageService,
        mailer: EmailService,
        full_name: Optional[str],
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
        avatar: Optional[UploadFile],
        cover_image: Optional[UploadFile] = None
    ) -> PendingUser:
        """
        Create a pending registration and send the verification email

        Raises:
            BadRequestError: missing or invalid fields, missing avatar
            ConflictError: email/username taken by an account or a pending registration
            InternalServerError: upload or email delivery failed
        """
        if any(value is None or not str(value).strip() for value in (full_name, email, username, password)):
            raise BadRequestError("All fields are required")

        full_name = full_name.strip()
        username = username.strip().lower()
        try:
            email = validate_email(email.strip(), check_deliverability=False).normalized.lower()
        except EmailNotValidError:
            raise BadRequestError("Please enter a valid email address")

        if is_blocked_email_domain(email):
            raise BadRequestError("Disposable email addresses are not allowed")

        strength = validate_password_strength(password)
        if not strength.is_valid:
            raise BadRequestError(PASSWORD_RULES_MESSAGE, errors=strength.errors)

        if await AccountService._find_user(db, email, username):
            raise ConflictError("User already exists")

        if await AccountService._find_pending(db, email, username):
            raise ConflictError("Verification already sent. Please check your email.")

        if avatar is None or not avatar.filename:
            raise BadRequestError("Avatar file is required")

        avatar_media = await storage.upload(avatar, "avatars", "image")
        cover_media = None
        if cover_image is not None and cover_image.filename:
            try:
                cover_media = await storage.upload(cover_image, "covers", "image")
            except ApiError:
                await storage.delete(avatar_media.public_id)
                raise

        raw_token = generate_token()
        pending_user = PendingUser(
            email=email,
            username=username,
            hashed_password=get_password_hash(password),
            full_name=full_name,
            avatar_url=avatar_media.url,
            avatar_public_id=avatar_media.public_id,
            cover_image_url=cover_media.url if cover_media else None,
            cover_image_public_id=cover_media.public_id if cover_media else None,
            verification_token=hash_token(raw_token),
            verification_expires=datetime.utcnow() + timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS),
        )

        try:
            # Expired rows still hold the unique email/username until purged
            await db.execute(
                delete(PendingUser).where(
                    or_(PendingUser.email == email, PendingUser.username == username),
                    PendingUser.created_at < PendingUser.retention_cutoff()
                )
            )
            db.add(pending_user)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            await storage.delete_many(pending_user.media_public_ids())
            raise

        try:
            await mailer.send_verification_email(pending_user.email, pending_user.full_name, raw_token)
        except EmailDeliveryError:
            await db.execute(delete(PendingUser).where(PendingUser.id == pending_user.id))
            await db.commit()
            await storage.delete_many(pending_user.media_public_ids())
            raise InternalServerError("Failed to send verification email")

        logger.info("Pending registration created", email=email, username=username)
        return pending_user

    @staticmethod
    async def verify_email(db: AsyncSession, raw_token: str) -> User:
        """
        Turn a pending registration into a verified account

        The new account is created and the pending row deleted in one
        transaction; a second use of the same token finds nothing.
        """
        result = await db.execute(
            select(PendingUser).where(
                PendingUser.verification_token == hash_token(raw_token),
                PendingUser.verification_expires > datetime.utcnow(),
                PendingUser.created_at >= PendingUser.retention_cutoff()
            )
        )
        pending_user = result.scalar_one_or_none()
        if pending_user is None:
            raise BadRequestError("Invalid or expired verification link")

        async with UnitOfWork(db, name="verify_email"):
            user = User(**pending_user.to_user_dict())
            db.add(user)
            await db.delete(pending_user)

        logger.info("Email verified, account created", user_id=str(user.id), username=user.username)
        return user

    @staticmethod
    async def _issue_tokens(db: AsyncSession, user: User) -> Tuple[str, str]:
        access_token = create_access_token({
            "sub": str(user.id),
            "email": user.email,
            "username": user.username,
            "fullName": user.full_name,
        })
        refresh_token = create_refresh_token({"sub": str(user.id)})
        user.refresh_token = refresh_token
        await db.commit()
        return access_token, refresh_token

    @staticmethod
    async def login(
        db: AsyncSession,
        email: Optional[str],
        username: Optional[str],
        password: str
    ) -> Tuple[User, str, str]:
        """Authenticate with email or username; returns the user and a fresh token pair"""
        if not email and not username:
            raise BadRequestError("username or email is required")

        email = email.strip().lower() if email else None
        username = username.strip().lower() if username and not email else None

        user = await AccountService._find_user(db, email, username)
        if user is None:
            if await AccountService._find_pending(db, email, username):
                raise ForbiddenError("Please verify your email before logging in")
            raise NotFoundError(message="User does not exist")

        if not verify_password(password, user.hashed_password):
            raise UnauthorizedError("Invalid user credentials")

        if not user.is_email_verified:
            raise ForbiddenError("Please verify your email before logging in")

        user.last_login = datetime.utcnow()
        access_token, refresh_token = await AccountService._issue_tokens(db, user)
        logger.info("User logged in", user_id=str(user.id))
        return user, access_token, refresh_token

    @staticmethod
    async def logout(db: AsyncSession, user: User) -> None:
        user.refresh_token = None
        await db.commit()

    @staticmethod
    async def refresh_tokens(db: AsyncSession, incoming_token: Optional[str]) -> Tuple[str, str]:
        """Rotate both tokens; the presented refresh token must be the stored one"""
        if not incoming_token:
            raise UnauthorizedError()

        payload = decode_refresh_token(incoming_token)
        try:
            user = await db.get(User, UUID(payload["sub"]))
        except ValueError:
            user = None
        if user is None:
            raise UnauthorizedError("Invalid refresh token")

        if incoming_token != user.refresh_token:
            raise UnauthorizedError("Refresh token is expired or used")

        return await AccountService._issue_tokens(db, user)

    @staticmethod
    async def change_password(db: AsyncSession, user: User, old_password: str, new_password: str) -> None:
        if not verify_password(old_password, user.hashed_password):
            raise BadRequestError("Invalid old password")
        user.hashed_password = get_password_hash(new_password)
        await db.commit()

    @staticmethod
    async def forgot_password(db: AsyncSession, mailer: EmailService, email: str) -> None:
        """
        Send a password reset link to a verified account

        Unknown addresses are ignored so the response does not reveal
        which emails are registered.
        """
        result = await db.execute(
            select(User).where(User.email == email.strip().lower(), User.is_email_verified.is_(True))
        )
        user = result.scalar_one_or_none()
        if user is None:
            logger.info("Password reset requested for unknown email")
            return

        raw_token = generate_token()
        user.password_reset_token = hash_token(raw_token)
        user.password_reset_expires = datetime.utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
        await db.commit()

        reset_url = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password/{raw_token}"
        try:
            await mailer.send_password_reset_email(user.email, user.full_name, reset_url)
        except EmailDeliveryError:
            user.password_reset_token = None
            user.password_reset_expires = None
            await db.commit()
            raise InternalServerError("Failed to send password reset email")

    @staticmethod
    async def reset_password(db: AsyncSession, raw_token: str, new_password: str) -> None:
        result = await db.execute(
            select(User).where(
                User.password_reset_token == hash_token(raw_token),
                User.password_reset_expires > datetime.utcnow()
            )
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise BadRequestError("Invalid or expired reset token")

        user.hashed_password = get_password_hash(new_password)
        user.password_reset_token = None
        user.password_reset_expires = None
        # Existing sessions end with the old password
        user.refresh_token = None
        await db.commit()

    @staticmethod
    async def update_account(
        db: AsyncSession,
        user: User,
        full_name: Optional[str],
        email: Optional[str]
    ) -> User:
        if not full_name and not email:
            raise BadRequestError("At least one field is required")

        if email:
            email = email.strip().lower()
            result = await db.execute(
                select(User.id).where(User.email == email, User.id != user.id)
            )
            if result.first() is not None:
                raise BadRequestError("Email already exists")
            user.email = email

        if full_name:
            user.full_name = full_name

        await db.commit()
        return user

    @staticmethod
    async def _replace_image(
        db: AsyncSession,
        storage: StorageService,
        user: User,
        file: Optional[UploadFile],
        field: str,
        folder: str,
        missing_message: str
    ) -> User:
        if file is None or not file.filename:
            raise BadRequestError(missing_message)

        media = await storage.upload(file, folder, "image")
        old_public_id = getattr(user, f"{field}_public_id")

        setattr(user, f"{field}_url", media.url)
        setattr(user, f"{field}_public_id", media.public_id)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            await storage.delete(media.public_id)
            raise

        await storage.delete(old_public_id)
        return user

    @staticmethod
    async def update_avatar(db: AsyncSession, storage: StorageService, user: User, file: Optional[UploadFile]) -> User:
        return await AccountService._replace_image(
            db, storage, user, file, "avatar", "avatars", "Avatar file is missing"
        )

    @staticmethod
    async def update_cover_image(db: AsyncSession, storage: StorageService, user: User, file: Optional[UploadFile]) -> User:
        return await AccountService._replace_image(
            db, storage, user, file, "cover_image", "covers", "Cover image file is missing"
        )

    @staticmethod
    async def get_channel_profile(db: AsyncSession, username: str, viewer: Optional[User]) -> ChannelProfile:
        """Channel page with subscriber and subscription counts"""
        if not username or not username.strip():
            raise BadRequestError("username is missing")

        subscribers_count = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        subscribed_to_count = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        result = await db.execute(
            select(User, subscribers_count, subscribed_to_count)
            .where(User.username == username.strip().lower())
        )
        row = result.first()
        if row is None:
            raise NotFoundError(message="channel does not exists")

        channel, subscribers, subscribed_to = row
        is_subscribed = False
        if viewer is not None:
            is_subscribed = await AccountService.is_subscribed(db, viewer.id, channel.id)

        return ChannelProfile(
            **UserResponse.model_validate(channel).model_dump(),
            subscribers_count=subscribers,
            channels_subscribed_to_count=subscribed_to,
            is_subscribed=is_subscribed,
        )

    @staticmethod
    async def is_subscribed(db: AsyncSession, subscriber_id: UUID, channel_id: UUID) -> bool:
        result = await db.execute(
            select(Subscription.id).where(
                Subscription.subscriber_id == subscriber_id,
                Subscription.channel_id == channel_id
            )
        )
        return result.first() is not None

    @staticmethod
    async def get_watch_history(db: AsyncSession, user: User) -> List[WatchHistoryItem]:
        """Watched videos with owner summary, most recent first"""
        result = await db.execute(
            select(WatchHistoryEntry)
            .where(WatchHistoryEntry.user_id == user.id)
            .options(
                joinedload(WatchHistoryEntry.video)
                .joinedload(Video.owner)
                .load_only(User.id, User.username, User.full_name, User.avatar_url)
            )
            .order_by(WatchHistoryEntry.watched_at.desc())
        )
        return [
            WatchHistoryItem(
                id=entry.video.id,
                title=entry.video.title,
                thumbnail_url=entry.video.thumbnail_url,
                duration=entry.video.duration,
                views=entry.video.views,
                owner=OwnerSummary.model_validate(entry.video.owner),
                watched_at=entry.watched_at,
            )
            for entry in result.scalars().all()
        ]

    @staticmethod
    async def record_watch(db: AsyncSession, user_id: UUID, video_id: UUID) -> None:
        """Move the video to the front of the watch history"""
        result = await db.execute(
            select(WatchHistoryEntry).where(
                WatchHistoryEntry.user_id == user_id,
                WatchHistoryEntry.video_id == video_id
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            db.add(WatchHistoryEntry(user_id=user_id, video_id=video_id))
        else:
            entry.watched_at = datetime.utcnow()

    @staticmethod
    async def remove_from_watch_history(db: AsyncSession, user: User, video_id: UUID) -> None:
        await db.execute(
            delete(WatchHistoryEntry).where(
                WatchHistoryEntry.user_id == user.id,
                WatchHistoryEntry.video_id == video_id
            )
        )
        await db.commit()

    @staticmethod
    async def delete_account(db: AsyncSession, storage: StorageService, user: User) -> None:
        """
        Delete the caller's account and everything that references it

        Stored media goes first and is best effort. The database part runs as
        a single unit of work; any failure rolls it back and surfaces as a 500.
        """
        user_id = user.id
        result = await db.execute(
            select(Video.video_public_id, Video.thumbnail_public_id).where(Video.owner_id == user_id)
        )
        media_keys = user.media_public_ids()
        for video_key, thumbnail_key in result.all():
            media_keys.extend(key for key in (video_key, thumbnail_key) if key)
        await storage.delete_many(media_keys)

        try:
            async with UnitOfWork(db, name="delete_account"):
                await CascadeService.purge_account(db, user_id)
        except ApiError:
            raise
        except Exception as e:
            logger.error("Account deletion failed", user_id=str(user_id), error=str(e))
            raise InternalServerError(str(e) or "Failed to delete user account")

        logger.info("Account deleted", user_id=str(user_id))
