"""
Notification Model
Created as a side effect of likes, comments and subscriptions
"""

from datetime import datetime
from uuid import uuid4
import enum

from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from videotube.db.database import Base


class NotificationTypeEnum(str, enum.Enum):
    """Types of notifications"""
    LIKE = "like"
    SUBSCRIBE = "subscribe"
    COMMENT = "comment"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid4)
    recipient_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    type = Column(String(20), nullable=False)
    video_id = Column(Uuid, ForeignKey("videos.id", ondelete="SET NULL"), nullable=True)
    comment_id = Column(Uuid, ForeignKey("comments.id", ondelete="SET NULL"), nullable=True)
    message = Column(Text, nullable=False)

    is_read = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    sender = relationship("User", foreign_keys=[sender_id])
    video = relationship("Video")

    __table_args__ = (
        Index('idx_recipient_unread', 'recipient_id', 'is_read'),
        Index('idx_recipient_created', 'recipient_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Notification {self.type} for user {self.recipient_id}>"
