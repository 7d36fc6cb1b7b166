"""
Media storage service: Cloudflare R2 (S3 compatible) with a local-disk fallback
"""

import os
import shutil
from pathlib import Path
from typing import Optional
from uuid import uuid4

import aiofiles
import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from videotube.core.config import settings
from videotube.core.exceptions import BadRequestError, MediaUploadError
from videotube.utils.media_utils import (
    IMAGE_CONTENT_PREFIX,
    VIDEO_CONTENT_PREFIX,
    get_video_duration,
    is_valid_image,
)

logger = structlog.get_logger()


class StoredMedia(BaseModel):
    """Result of a successful upload"""
    url: str
    public_id: str
    duration: int = 0


class StorageService:
    """Upload and delete media files by storage key"""

    CHUNK_SIZE = 1024 * 1024

    def __init__(self, upload_dir: str = settings.UPLOAD_DIR):
        self.upload_dir = Path(upload_dir)
        self.temp_dir = self.upload_dir / "temp"
        self.temp_dir.mkdir(parents=True, exist_ok=True)

        # R2 storage configuration
        self.use_r2 = settings.USE_R2_STORAGE.lower() == 'true'
        self.r2_bucket = settings.R2_BUCKET_NAME
        self.r2_endpoint = settings.R2_ENDPOINT_URL
        self.r2_access_key = settings.R2_ACCESS_KEY_ID
        self.r2_secret_key = settings.R2_SECRET_ACCESS_KEY
        self.r2_public_url = (settings.R2_PUBLIC_URL or "").rstrip("/")
        self._r2_client = None

    def _get_r2_client(self):
        """Initialize R2 client using boto3 S3-compatible API"""
        if self._r2_client is not None:
            return self._r2_client
        if not all([self.r2_endpoint, self.r2_access_key, self.r2_secret_key, self.r2_bucket]):
            raise MediaUploadError("R2 credentials not configured")

        self._r2_client = boto3.client(
            's3',
            endpoint_url=self.r2_endpoint,
            aws_access_key_id=self.r2_access_key,
            aws_secret_access_key=self.r2_secret_key,
            region_name='auto'
        )
        return self._r2_client

    def _public_url(self, key: str) -> str:
        if self.use_r2:
            return f"{self.r2_public_url}/{key}"
        return f"{settings.BACKEND_URL.rstrip('/')}/uploads/{key}"

    async def _write_temp_file(self, file: UploadFile, max_size: int) -> Path:
        """Stream the upload to a temp file, enforcing the size limit"""
        suffix = Path(file.filename or "").suffix.lower()
        temp_path = self.temp_dir / f"{uuid4().hex}{suffix}"
        size = 0
        async with aiofiles.open(temp_path, "wb") as out:
            while True:
                chunk = await file.read(self.CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_size:
                    await out.close()
                    temp_path.unlink(missing_ok=True)
                    raise BadRequestError(
                        f"File too large: maximum size is {max_size // (1024 * 1024)}MB"
                    )
                await out.write(chunk)
        if size == 0:
            temp_path.unlink(missing_ok=True)
            raise BadRequestError("Uploaded file is empty")
        return temp_path

    async def _store(self, temp_path: Path, key: str, content_type: str) -> None:
        if self.use_r2:
            client = self._get_r2_client()
            await run_in_threadpool(
                client.upload_file,
                str(temp_path),
                self.r2_bucket,
                key,
                ExtraArgs={"ContentType": content_type},
            )
            logger.info("File uploaded to R2", file_key=key, bucket=self.r2_bucket)
        else:
            destination = self.upload_dir / key
            destination.parent.mkdir(parents=True, exist_ok=True)
            await run_in_threadpool(shutil.move, str(temp_path), str(destination))
            logger.info("File stored locally", file_key=key)

    async def upload(self, file: UploadFile, folder: str, kind: str = "image") -> StoredMedia:
        """
        Validate and store an uploaded file

        Args:
            file: Incoming multipart file
            folder: Key prefix (avatars, covers, videos, thumbnails)
            kind: "image" or "video"

        Returns:
            StoredMedia with public url, storage key and (for videos) duration

        Raises:
            BadRequestError: wrong type, empty or oversized file
            MediaUploadError: the object store rejected the upload
        """
        prefix = VIDEO_CONTENT_PREFIX if kind == "video" else IMAGE_CONTENT_PREFIX
        content_type = file.content_type or ""
        if not content_type.startswith(prefix):
            raise BadRequestError(f"Invalid file type: expected {kind}")

        max_size = settings.MAX_VIDEO_SIZE if kind == "video" else settings.MAX_IMAGE_SIZE
        temp_path = await self._write_temp_file(file, max_size)

        try:
            duration = 0
            if kind == "video":
                duration = await run_in_threadpool(get_video_duration, str(temp_path))
            elif not await run_in_threadpool(is_valid_image, str(temp_path)):
                raise BadRequestError("Uploaded file is not a valid image")

            key = f"{folder}/{uuid4().hex}{temp_path.suffix}"
            await self._store(temp_path, key, content_type)
            return StoredMedia(url=self._public_url(key), public_id=key, duration=duration)
        except (ClientError, BotoCoreError, OSError) as e:
            logger.error("Media upload failed", error=str(e), filename=file.filename, folder=folder)
            raise MediaUploadError("Error while uploading file", filename=file.filename)
        finally:
            if temp_path.exists():
                os.remove(temp_path)

    async def delete(self, public_id: Optional[str]) -> bool:
        """
        Delete a stored file by its key

        Never raises: failures are logged and reported as False.
        """
        if not public_id:
            return False
        try:
            if self.use_r2:
                client = self._get_r2_client()
                await run_in_threadpool(client.delete_object, Bucket=self.r2_bucket, Key=public_id)
            else:
                full_path = self.upload_dir / public_id
                if not full_path.is_file():
                    return False
                full_path.unlink()
            logger.info("File deleted successfully", file_key=public_id)
            return True
        except Exception as e:
            logger.warning("File deletion failed", error=str(e), file_key=public_id)
            return False

    async def delete_many(self, public_ids) -> int:
        """Best-effort delete of several keys, returns how many were removed"""
        deleted = 0
        for public_id in public_ids:
            if await self.delete(public_id):
                deleted += 1
        return deleted


_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """FastAPI dependency returning the shared storage service"""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
