"""Report-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from colloquium.models.report import ReportStatus, ReportType, ReportUrgency


class ReportCreate(BaseModel):
    """Schema for filing a report."""

    type: ReportType
    target_id: str = Field(..., min_length=1)
    target_name: str | None = Field(None, max_length=200)
    reason: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=10, max_length=100)
    urgency: ReportUrgency = ReportUrgency.MEDIUM


class ReportResolve(BaseModel):
    resolution: str = Field(..., min_length=1, max_length=500)


class ReportDismiss(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class ReportResponse(BaseModel):
    """Schema for a report as shown in the moderation queue."""

    id: str
    type: ReportType
    target_id: str
    target_name: str
    reporter_id: str
    reporter_name: str
    reporter_email: str | None
    reason: str
    description: str
    urgency: ReportUrgency
    target_author_id: str | None
    target_author_name: str | None
    forum_id: str | None
    forum_name: str | None
    post_id: str | None
    post_title: str | None
    status: ReportStatus
    resolution: str | None
    resolved_at: datetime | None
    resolved_by: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportedContentDeletionResponse(BaseModel):
    report: ReportResponse
    deleted_content: ReportType
    deleted_comments: int
