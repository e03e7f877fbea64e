"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for creating a comment or a reply."""

    post_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=500)
    parent_comment_id: str | None = Field(None, description="Parent comment ID for replies")


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: str
    content: str
    author_id: str
    post_id: str
    parent_comment_id: str | None
    like_count: int
    created_at: datetime
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class CommentDeletionResponse(BaseModel):
    deleted_count: int
    is_moderator_action: bool
