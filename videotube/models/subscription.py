"""
Subscription model: subscriber account follows a channel account
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from videotube.db.database import Base


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid4)
    subscriber_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    channel_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    subscriber = relationship("User", foreign_keys=[subscriber_id])
    channel = relationship("User", foreign_keys=[channel_id])

    __table_args__ = (
        UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscription_pair'),
        CheckConstraint("subscriber_id <> channel_id", name="no_self_subscription"),
    )

    def __repr__(self):
        return f"<Subscription(subscriber_id={self.subscriber_id}, channel_id={self.channel_id})>"
