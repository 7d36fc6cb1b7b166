"""
Community post model (short text update on a channel)
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from videotube.db.database import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Uuid, primary_key=True, default=uuid4)
    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    owner = relationship("User")

    def __repr__(self):
        return f"<Post(id={self.id}, owner_id={self.owner_id})>"

    def preview(self, length: int = 50) -> str:
        """Shortened content used inside notification messages"""
        if len(self.content) > length:
            return self.content[:length] + "..."
        return self.content
