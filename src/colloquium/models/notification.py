"""SQLAlchemy model for per-user notification mailboxes."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from colloquium.db.ids import new_id
from colloquium.db.session import Base
from colloquium.db.time import utcnow


class NotificationType(str, enum.Enum):
    """Business events a user can be notified about."""

    MEMBERSHIP_APPROVED = "membership_approved"
    MODERATOR_ASSIGNED = "moderator_assigned"
    OWNERSHIP_TRANSFERRED = "ownership_transferred"
    COMMUNITY_BAN = "community_ban"
    POST_APPROVED = "post_approved"
    POST_REJECTED = "post_rejected"
    POST_DELETED = "post_deleted"
    COMMENT_DELETED = "comment_deleted"


class Notification(Base):
    """Append-only mailbox entry. Only ``is_read`` changes after creation."""

    __tablename__ = "notification"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    # Per-mailbox insertion order; breaks ties between equal timestamps.
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_actionable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    action_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
