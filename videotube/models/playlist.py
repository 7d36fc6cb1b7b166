"""
Playlist model: an ordered list of videos owned by an account
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from videotube.db.database import Base


class Playlist(Base):
    __tablename__ = "playlists"

    id = Column(Uuid, primary_key=True, default=uuid4)
    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    owner = relationship("User")
    entries = relationship("PlaylistVideo", order_by="PlaylistVideo.position")

    def __repr__(self):
        return f"<Playlist(id={self.id}, name={self.name})>"


class PlaylistVideo(Base):
    """Position of a video inside a playlist"""
    __tablename__ = "playlist_videos"

    id = Column(Uuid, primary_key=True, default=uuid4)
    playlist_id = Column(Uuid, ForeignKey("playlists.id"), nullable=False, index=True)
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    added_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    video = relationship("Video")

    __table_args__ = (
        UniqueConstraint('playlist_id', 'video_id', name='uq_playlist_video'),
    )
