"""SQLAlchemy models for communities, memberships and moderators."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from colloquium.db.ids import new_id
from colloquium.db.session import Base
from colloquium.db.time import utcnow

COMMUNITY_STATUS_ACTIVE = "active"
COMMUNITY_STATUS_DISABLED = "disabled"


class MembershipState(str, enum.Enum):
    """Relationship between a user and a community.

    NONE is never stored: a missing membership row means "not a member".
    """

    NONE = "none"
    PENDING = "pending"
    MEMBER = "member"
    BANNED = "banned"


class BanDuration(str, enum.Enum):
    """Supported ban lengths."""

    ONE_DAY = "1d"
    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"
    PERMANENT = "permanent"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Community(Base):
    """A named professional community ("forum")."""

    __tablename__ = "community"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    rules: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=COMMUNITY_STATUS_ACTIVE)

    requires_approval: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    requires_post_approval: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Denormalized; equals the number of MEMBER rows in community_membership.
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Denormalized; counts active posts only.
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_post_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class CommunityMembership(Base):
    """Single membership state per (community, user) pair.

    Pending requests and bans live on the same row as memberships, so a user
    can never be pending, a member and banned at the same time.
    """

    __tablename__ = "community_membership"

    community_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("community.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    state: Mapped[MembershipState] = mapped_column(
        Enum(
            MembershipState,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
        ),
        nullable=False,
    )

    joined_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    requested_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    banned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    banned_by: Mapped[str | None] = mapped_column(Text, nullable=True)
    ban_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    ban_duration: Mapped[BanDuration | None] = mapped_column(
        Enum(
            BanDuration,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
        ),
        nullable=True,
    )

    # Snapshot of the user's email/name/role taken on request or ban.
    user_snapshot: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)


class CommunityModerator(Base):
    """Moderator assignment inside a community."""

    __tablename__ = "community_moderator"

    community_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("community.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    added_by: Mapped[str] = mapped_column(Text, nullable=False)
