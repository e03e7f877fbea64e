"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse, CommentUpdate
from .community import (
    BanCreate,
    CommunityCreate,
    CommunityDelete,
    CommunityResponse,
    CommunitySettingsUpdate,
)
from .notification import NotificationResponse
from .post import PostCreate, PostResponse, PostUpdate
from .report import ReportCreate, ReportResponse

__all__ = [
    "BanCreate", "CommunityCreate", "CommunityDelete", "CommunityResponse",
    "CommunitySettingsUpdate",
    "CommentCreate", "CommentResponse", "CommentUpdate",
    "NotificationResponse",
    "PostCreate", "PostResponse", "PostUpdate",
    "ReportCreate", "ReportResponse",
]
