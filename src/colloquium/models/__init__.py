# src/colloquium/models/__init__.py
"""SQLAlchemy models for the Colloquium application."""

from .community import (
    BanDuration,
    Community,
    CommunityMembership,
    CommunityModerator,
    MembershipState,
)
from .notification import Notification, NotificationType
from .post import Comment, Post
from .report import Report, ReportStatus, ReportType, ReportUrgency
from .user import User

__all__ = [
    "BanDuration", "Community", "CommunityMembership", "CommunityModerator", "MembershipState",
    "Notification", "NotificationType",
    "Comment", "Post",
    "Report", "ReportStatus", "ReportType", "ReportUrgency",
    "User",
]
