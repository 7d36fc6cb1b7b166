"""
Shared response schemas: camelCase base model, owner summary and page envelope
"""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every schema exchanged with the client (camelCase on the wire)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class OwnerSummary(CamelModel):
    """The few account fields attached to videos, comments, posts and notifications"""
    id: UUID = Field(..., alias="_id")
    username: str
    full_name: str
    avatar_url: str = Field(..., alias="avatar")


class Page(CamelModel):
    """Paginated list envelope"""
    docs: List[Any]
    total_docs: int
    limit: int
    page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    next_page: Optional[int] = None
    prev_page: Optional[int] = None


class TimestampedModel(CamelModel):
    created_at: datetime
    updated_at: datetime
