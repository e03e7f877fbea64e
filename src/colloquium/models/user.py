# src/colloquium/models/user.py
"""SQLAlchemy model for the user directory."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from colloquium.db.session import Base
from colloquium.db.time import utcnow

ROLE_UNVERIFIED = "unverified"
ROLE_DOCTOR = "doctor"
ROLE_MODERATOR = "moderator"
ROLE_ADMIN = "admin"

# Verified practitioners; the only role eligible for community moderation.
PROFESSIONAL_ROLES = frozenset({ROLE_DOCTOR})
# Roles allowed to publish posts and comments.
AUTHOR_ROLES = frozenset({ROLE_DOCTOR, ROLE_MODERATOR, ROLE_ADMIN})
# Platform-wide governance roles, independent of any community.
SYSTEM_MODERATION_ROLES = frozenset({ROLE_MODERATOR, ROLE_ADMIN})


class User(Base):
    """Directory entry for a platform user.

    The directory schema is owned by the identity subsystem; the community
    services only read the role and adjust the denormalized stats.
    """

    __tablename__ = "user_account"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    first_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default=ROLE_UNVERIFIED)
    specialty: Mapped[str | None] = mapped_column(Text, nullable=True)

    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    contribution_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    forum_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    joined_forums_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Community ids; always reassigned, never mutated in place.
    joined_forums: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def display_name(self) -> str:
        """Return the user's full name, or a generic label when unknown."""
        full = " ".join(part for part in (self.first_name, self.last_name) if part).strip()
        return full or "User"

    @property
    def is_professional(self) -> bool:
        """Return True for verified practitioners."""
        return self.role in PROFESSIONAL_ROLES

    @property
    def can_author(self) -> bool:
        """Return True when the user may publish posts and comments."""
        return self.role in AUTHOR_ROLES

    @property
    def is_system_moderator(self) -> bool:
        """Return True for platform moderators and administrators."""
        return self.role in SYSTEM_MODERATION_ROLES
