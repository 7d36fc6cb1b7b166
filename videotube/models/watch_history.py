"""
Watch history: the videos an account has viewed, most recent first
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Index, Uuid
from sqlalchemy.orm import relationship

from videotube.db.database import Base


class WatchHistoryEntry(Base):
    __tablename__ = "watch_history"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=False, index=True)
    watched_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    video = relationship("Video")

    __table_args__ = (
        UniqueConstraint('user_id', 'video_id', name='uq_watch_history_user_video'),
        Index('ix_watch_history_user_watched', 'user_id', 'watched_at'),
    )
