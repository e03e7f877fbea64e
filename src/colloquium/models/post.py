# src/colloquium/models/post.py
"""SQLAlchemy models for posts and comments."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from colloquium.db.ids import new_id
from colloquium.db.session import Base
from colloquium.db.time import utcnow

# Post state machine: pending -> active; pending -> deleted; active -> deleted.
POST_STATUS_PENDING = "pending"
POST_STATUS_ACTIVE = "active"


class Post(Base):
    """Primary content entity published inside a community.

    Pending posts are invisible to aggregates: they are counted in the
    community and author stats only once they become active.
    """

    __tablename__ = "post"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # No foreign keys: authors and communities may disappear before their posts.
    author_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    forum_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=POST_STATUS_ACTIVE)

    # Ordered list of {"url": ..., ...} dicts; reassigned on edit.
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    validated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    validated_by: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_active(self) -> bool:
        """Return True when the post counts toward community and author stats."""
        return self.status == POST_STATUS_ACTIVE

    @property
    def image_urls(self) -> list[str]:
        """Return the URLs of attached images in order."""
        return [image["url"] for image in self.images or [] if image.get("url")]


class Comment(Base):
    """Comment on a post; replies point at their parent comment."""

    __tablename__ = "comment"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    post_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # NULL for top-level comments.
    parent_comment_id: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
