"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PostImage(BaseModel):
    """Image attached to a post, as uploaded to the media store."""

    url: str = Field(..., min_length=1)
    width: int | None = None
    height: int | None = None

    model_config = ConfigDict(extra="allow")


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=10000)
    forum_id: str = Field(..., min_length=1, description="Community the post belongs to")
    images: list[PostImage] = Field(default_factory=list, max_length=1)


class PostUpdate(BaseModel):
    """Schema for editing a post; omitted fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1, max_length=10000)
    images: list[PostImage] | None = Field(None, max_length=1)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: str
    title: str
    content: str
    author_id: str
    forum_id: str
    status: str
    images: list[dict[str, Any]]
    comment_count: int
    view_count: int
    created_at: datetime
    updated_at: datetime | None
    validated_at: datetime | None
    validated_by: str | None

    model_config = ConfigDict(from_attributes=True)


class PendingPostResponse(BaseModel):
    post: PostResponse
    author_name: str
    author_specialty: str | None


class PostDeletionResponse(BaseModel):
    deleted_comments: int
    updated_authors: int
    deleted_images: int
    moderator_deletion: bool
    failed_images: list[str]
