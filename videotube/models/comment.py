"""
Comment model: text attached to exactly one video or one post
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, Text, DateTime, ForeignKey, Index, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from videotube.db.database import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid4)
    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Parent: exactly one of these is set
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=True)
    post_id = Column(Uuid, ForeignKey("posts.id"), nullable=True)

    content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    owner = relationship("User")

    __table_args__ = (
        CheckConstraint("(video_id IS NULL) <> (post_id IS NULL)", name="one_parent"),
        Index('ix_comments_video_created', 'video_id', 'created_at'),
        Index('ix_comments_post_created', 'post_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Comment(id={self.id}, owner_id={self.owner_id})>"
