"""SQLAlchemy model for user-filed content reports."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column

from colloquium.db.ids import new_id
from colloquium.db.session import Base
from colloquium.db.time import utcnow


class ReportType(str, enum.Enum):
    """Kind of entity a report points at."""

    POST = "post"
    COMMENT = "comment"
    USER = "user"
    PROFILE = "profile"
    FORUM = "forum"


class ReportStatus(str, enum.Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class ReportUrgency(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Report(Base):
    """A report awaiting review by platform moderators.

    Context about the target (author, community, parent post) is copied in
    when the report is filed, so the queue stays readable after the reported
    content is deleted.
    """

    __tablename__ = "report"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    type: Mapped[ReportType] = mapped_column(
        Enum(ReportType, native_enum=False, values_callable=_enum_values),
        nullable=False,
        index=True,
    )
    target_id: Mapped[str] = mapped_column(Text, nullable=False)
    target_name: Mapped[str] = mapped_column(Text, nullable=False)

    reporter_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    reporter_name: Mapped[str] = mapped_column(Text, nullable=False)
    reporter_email: Mapped[str | None] = mapped_column(Text, nullable=True)

    reason: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    urgency: Mapped[ReportUrgency] = mapped_column(
        Enum(ReportUrgency, native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=ReportUrgency.MEDIUM,
    )

    target_author_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_author_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    forum_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    forum_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_title: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus, native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=ReportStatus.PENDING,
        index=True,
    )
    resolution: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_by: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
