"""
Pagination helper shared by every list endpoint
"""

import math
from typing import Any, Callable, Optional

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.core.config import settings
from videotube.schemas.common import Page


def _parse_positive_int(raw: Any, default: int) -> int:
    """Positive integer from a query value, or the default for anything else"""
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


class PageParams:
    """Validated 1-based page number and page size"""

    def __init__(self, page: int = 1, limit: int = settings.DEFAULT_PAGE_SIZE):
        self.page = page
        self.limit = limit

    @classmethod
    def from_query(
        cls,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        default_limit: int = settings.DEFAULT_PAGE_SIZE
    ) -> "PageParams":
        """
        Parse raw query values

        Anything that is not a positive integer falls back to page 1 and the
        default limit; limits are capped at MAX_PAGE_SIZE.
        """
        return cls(
            page=_parse_positive_int(page, 1),
            limit=min(_parse_positive_int(limit, default_limit), settings.MAX_PAGE_SIZE),
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def build_page(self, docs: list, total_docs: int) -> Page:
        total_pages = math.ceil(total_docs / self.limit) if total_docs else 0
        has_next = self.page < total_pages
        has_prev = self.page > 1
        return Page(
            docs=docs,
            total_docs=total_docs,
            limit=self.limit,
            page=self.page,
            total_pages=total_pages,
            has_next_page=has_next,
            has_prev_page=has_prev,
            next_page=self.page + 1 if has_next else None,
            prev_page=self.page - 1 if has_prev else None,
        )


async def paginate(
    db: AsyncSession,
    statement: Select,
    count_statement: Select,
    params: PageParams,
    mapper: Optional[Callable[[Any], Any]] = None
) -> Page:
    """
    Run a paginated query

    Args:
        db: Database session
        statement: Filtered, sorted select (joins and derived counts included)
        count_statement: Select returning the total number of matching rows
        params: Page number and size
        mapper: Converts each result row into a response item; defaults to the
            first column of the row

    Returns:
        Page envelope; a page past the end has no docs but the true totals
    """
    total_docs = (await db.execute(count_statement)).scalar_one()

    docs = []
    if total_docs and params.skip < total_docs:
        result = await db.execute(statement.offset(params.skip).limit(params.limit))
        rows = result.all()
        docs = [mapper(row) if mapper else row[0] for row in rows]

    return params.build_page(docs, total_docs)
