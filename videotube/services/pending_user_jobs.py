"""
Background job that purges expired pending registrations
"""
import asyncio
from typing import List, Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.config import settings
from videotube.db import database
from videotube.models.pending_user import PendingUser
from videotube.services.storage_service import StorageService, get_storage_service

logger = structlog.get_logger()


class PendingUserJobManager:
    """Runs the pending registration purge on a fixed interval"""

    def __init__(self, storage: Optional[StorageService] = None):
        self.is_running = False
        self.tasks: List[asyncio.Task] = []
        self.storage = storage

    async def start(self):
        """Start the periodic purge"""
        if self.is_running:
            logger.warning("PendingUserJobManager is already running")
            return

        self.is_running = True
        logger.info("Starting PendingUserJobManager...")
        self.tasks = [asyncio.create_task(self._periodic_purge())]

    async def stop(self):
        """Stop the periodic purge"""
        if not self.is_running:
            return

        logger.info("Stopping PendingUserJobManager...")
        self.is_running = False

        for task in self.tasks:
            if not task.cancelled():
                task.cancel()

        await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks.clear()

        logger.info("PendingUserJobManager stopped")

    async def _periodic_purge(self):
        while self.is_running:
            try:
                async with database.get_db_session() as db:
                    await self.purge_expired(db)

                await asyncio.sleep(settings.PENDING_USER_PURGE_INTERVAL_MINUTES * 60)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Error in pending registration purge", error=str(e))
                await asyncio.sleep(5 * 60)

    async def purge_expired(self, db: AsyncSession) -> int:
        """
        Delete pending registrations older than the retention window

        Their uploaded media is removed best effort after the commit.

        Returns:
            Number of deleted rows
        """
        cutoff = PendingUser.retention_cutoff()
        result = await db.execute(select(PendingUser).where(PendingUser.created_at < cutoff))
        expired = result.scalars().all()
        if not expired:
            return 0

        media_keys = []
        for pending_user in expired:
            media_keys.extend(pending_user.media_public_ids())

        await db.execute(delete(PendingUser).where(PendingUser.created_at < cutoff))
        await db.commit()

        storage = self.storage or get_storage_service()
        await storage.delete_many(media_keys)

        logger.info("Expired pending registrations purged", count=len(expired))
        return len(expired)


pending_user_jobs = PendingUserJobManager()
