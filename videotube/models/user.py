"""
User model for authentication, profile and channel data
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, String, Boolean, DateTime, Text, Uuid

from videotube.db.database import Base


class User(Base):
    """A verified account. Every account is also a channel."""
    __tablename__ = "users"

    # Primary key
    id = Column(Uuid, primary_key=True, default=uuid4)

    # Authentication fields
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    refresh_token = Column(Text, nullable=True)

    # Profile fields
    full_name = Column(String(100), nullable=False, index=True)
    avatar_url = Column(String(500), nullable=False)
    avatar_public_id = Column(String(255), nullable=True)
    cover_image_url = Column(String(500), nullable=True)
    cover_image_public_id = Column(String(255), nullable=True)

    # Email verification
    is_email_verified = Column(Boolean, default=False, nullable=False)

    # Password reset (sha256 hex of the raw token sent by email)
    password_reset_token = Column(String(64), nullable=True, index=True)
    password_reset_expires = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    last_login = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, username={self.username})>"

    def media_public_ids(self) -> list:
        """Storage keys of the profile images"""
        return [key for key in (self.avatar_public_id, self.cover_image_public_id) if key]
