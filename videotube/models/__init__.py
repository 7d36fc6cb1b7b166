"""
Database models for the VideoTube platform
"""

from .user import User
from .pending_user import PendingUser
from .video import Video
from .post import Post
from .comment import Comment
from .like import Like
from .subscription import Subscription
from .notification import Notification, NotificationTypeEnum
from .playlist import Playlist, PlaylistVideo
from .watch_history import WatchHistoryEntry

__all__ = [
    "User",
    "PendingUser",
    "Video",
    "Post",
    "Comment",
    "Like",
    "Subscription",
    "Notification",
    "NotificationTypeEnum",
    "Playlist",
    "PlaylistVideo",
    "WatchHistoryEntry",
]
