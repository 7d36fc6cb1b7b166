"""
Video model: a published content item
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from videotube.db.database import Base


class Video(Base):
    __tablename__ = "videos"

    id = Column(Uuid, primary_key=True, default=uuid4)
    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)

    # Media references; the storage key is kept next to each URL
    video_url = Column(String(500), nullable=False)
    video_public_id = Column(String(255), nullable=True)
    thumbnail_url = Column(String(500), nullable=False)
    thumbnail_public_id = Column(String(255), nullable=True)

    duration = Column(Integer, default=0, nullable=False)  # seconds
    views = Column(Integer, default=0, nullable=False)
    is_published = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    owner = relationship("User")

    __table_args__ = (
        Index('ix_videos_owner_created', 'owner_id', 'created_at'),
        Index('ix_videos_published_created', 'is_published', 'created_at'),
    )

    def __repr__(self):
        return f"<Video(id={self.id}, title={self.title})>"

    def media_public_ids(self) -> list:
        return [key for key in (self.video_public_id, self.thumbnail_public_id) if key]
