"""
Pending registration model: user data held until the email address is verified
"""

from datetime import datetime, timedelta
from uuid import uuid4

from sqlalchemy import Column, String, DateTime, Uuid

from videotube.core.config import settings
from videotube.db.database import Base


class PendingUser(Base):
    """Registration awaiting email confirmation; expires after PENDING_USER_TTL_HOURS"""
    __tablename__ = "pending_users"

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=False)
    avatar_url = Column(String(500), nullable=False)
    avatar_public_id = Column(String(255), nullable=True)
    cover_image_url = Column(String(500), nullable=True)
    cover_image_public_id = Column(String(255), nullable=True)

    # sha256 hex of the raw verification token
    verification_token = Column(String(64), nullable=True, index=True)
    verification_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<PendingUser(id={self.id}, email={self.email}, username={self.username})>"

    @staticmethod
    def retention_cutoff() -> datetime:
        """Rows created before this instant are expired"""
        return datetime.utcnow() - timedelta(hours=settings.PENDING_USER_TTL_HOURS)

    def media_public_ids(self) -> list:
        return [key for key in (self.avatar_public_id, self.cover_image_public_id) if key]

    def to_user_dict(self) -> dict:
        """Convert pending registration to user creation dict"""
        return {
            "email": self.email,
            "username": self.username,
            "hashed_password": self.hashed_password,
            "full_name": self.full_name,
            "avatar_url": self.avatar_url,
            "avatar_public_id": self.avatar_public_id,
            "cover_image_url": self.cover_image_url,
            "cover_image_public_id": self.cover_image_public_id,
            "is_email_verified": True,
        }
