"""Business logic services for the Colloquium application."""

from .comment_service import CommentService
from .community_service import CommunityService
from .media import MediaStore, get_media_store
from .notification_service import NotificationService
from .post_service import PostService
from .report_service import ReportService

__all__ = [
    "CommentService",
    "CommunityService",
    "MediaStore",
    "NotificationService",
    "PostService",
    "ReportService",
    "get_media_store",
]
