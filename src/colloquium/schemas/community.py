"""Community-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from colloquium.models.community import BanDuration


class CommunityCreate(BaseModel):
    """Schema for creating a new community."""

    name: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=10, max_length=500)
    rules: str | None = Field(None, max_length=1000, description="Defaults to the platform rules")
    requires_approval: bool = False
    requires_post_approval: bool = False


class CommunityNameCheck(BaseModel):
    """Schema for checking whether a community name is taken."""

    name: str = Field(..., min_length=1, max_length=50)


class CommunityNameCheckResponse(BaseModel):
    exists: bool
    existing_name: str = ""


class CommunitySettingsUpdate(BaseModel):
    """Schema for owner setting changes; omitted fields are left untouched."""

    name: str | None = Field(None, min_length=3, max_length=50)
    description: str | None = Field(None, min_length=10, max_length=500)
    rules: str | None = Field(None, max_length=1000)
    requires_approval: bool | None = None
    requires_post_approval: bool | None = None


class CommunityDelete(BaseModel):
    """Schema for a platform-level community deletion."""

    reason: str = Field(..., min_length=10, max_length=100)


class BanCreate(BaseModel):
    """Schema for banning a user from a community."""

    user_id: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=10)
    duration: BanDuration


class CommunityResponse(BaseModel):
    """Schema for community information returned by the API."""

    id: str
    name: str
    description: str
    rules: str
    owner_id: str
    status: str
    requires_approval: bool
    requires_post_approval: bool
    member_count: int
    post_count: int
    last_post_at: datetime | None
    created_at: datetime
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class PendingRequestResponse(BaseModel):
    user_id: str
    requested_at: datetime | None
    user_snapshot: dict[str, Any] | None

    model_config = ConfigDict(from_attributes=True)


class ModeratorResponse(BaseModel):
    user_id: str
    added_at: datetime
    added_by: str

    model_config = ConfigDict(from_attributes=True)


class BanResponse(BaseModel):
    """Schema for a ban record."""

    user_id: str
    banned_at: datetime | None
    banned_by: str | None
    ban_reason: str | None
    ban_duration: BanDuration | None
    user_snapshot: dict[str, Any] | None

    model_config = ConfigDict(from_attributes=True)


class BanStatusResponse(BaseModel):
    is_banned: bool
    ban: BanResponse | None = None


class CommunityDetailResponse(CommunityResponse):
    """Community with its embedded membership collections."""

    members: list[str]
    pending_requests: list[PendingRequestResponse]
    moderators: list[ModeratorResponse]
    bans: list[BanResponse]


class SettingsUpdateResponse(BaseModel):
    community: CommunityResponse
    posts_activated: int
    members_approved: int


class CommunityDeletionResponse(BaseModel):
    deleted_posts: int
    deleted_comments: int
    updated_users: int
    failed_images: list[str]


class PostRejectRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)
