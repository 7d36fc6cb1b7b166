"""
Like model: join record between an account and one video, comment or post
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from videotube.db.database import Base


class Like(Base):
    __tablename__ = "likes"

    id = Column(Uuid, primary_key=True, default=uuid4)
    liked_by_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Target: exactly one of these is set
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=True, index=True)
    comment_id = Column(Uuid, ForeignKey("comments.id"), nullable=True, index=True)
    post_id = Column(Uuid, ForeignKey("posts.id"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    liked_by = relationship("User")
    video = relationship("Video")

    __table_args__ = (
        UniqueConstraint('liked_by_id', 'video_id', name='uq_like_user_video'),
        UniqueConstraint('liked_by_id', 'comment_id', name='uq_like_user_comment'),
        UniqueConstraint('liked_by_id', 'post_id', name='uq_like_user_post'),
        CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN post_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="one_target"
        ),
    )

    def __repr__(self):
        return f"<Like(liked_by_id={self.liked_by_id}, video_id={self.video_id}, comment_id={self.comment_id}, post_id={self.post_id})>"
