"""Notification-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    """Schema for a mailbox entry returned by the API."""

    id: str
    type: str
    title: str
    message: str
    is_read: bool
    is_actionable: bool
    action_data: dict[str, Any]
    created_at: datetime
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationCountResponse(BaseModel):
    count: int
