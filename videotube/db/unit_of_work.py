"""
Unit of work: a single commit/rollback boundary around a multi-step mutation
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class UnitOfWork:
    """
    Async context manager that commits the session when the block finishes
    and rolls every pending mutation back when it raises.

    Usage::

        async with UnitOfWork(db, name="delete_video") as uow:
            await uow.session.execute(delete(Comment).where(...))
            await uow.session.execute(delete(Video).where(...))
    """

    def __init__(self, session: AsyncSession, name: str = "unit_of_work"):
        self.session = session
        self.name = name

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            await self.session.commit()
            logger.debug("Unit of work committed", unit=self.name)
        else:
            await self.session.rollback()
            logger.warning(
                "Unit of work rolled back",
                unit=self.name,
                error_type=exc_type.__name__,
                error=str(exc)
            )
        return False
