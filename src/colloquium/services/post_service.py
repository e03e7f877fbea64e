"""Post creation, editing and cascading deletion."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from colloquium.db.time import utcnow
from colloquium.models import Comment, Community, Post
from colloquium.models.post import POST_STATUS_ACTIVE, POST_STATUS_PENDING
from colloquium.services.directory import get_user, increment_community, increment_user_stats
from colloquium.services.errors import ForbiddenError, NotFoundError
from colloquium.services.media import MediaStore, get_media_store
from colloquium.services.notification_service import NotificationService, notify_safely
from colloquium.services.permissions import can_moderate_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostEdit:
    post: Post
    removed_images: list[str] = field(default_factory=list)
    failed_images: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PostDeletion:
    """Summary of a cascading post deletion."""

    deleted_comments: int
    updated_authors: int
    deleted_images: int
    moderator_deletion: bool
    notified: bool = False
    failed_images: list[str] = field(default_factory=list)


def _normalize_images(images: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """Copy image entries, dropping any without a URL."""
    return [dict(image) for image in images or [] if image.get("url")]


class PostService:
    """Service handling the post state machine and its counters."""

    def __init__(
        self,
        db: Session,
        notifications: NotificationService | None = None,
        media: MediaStore | None = None,
    ) -> None:
        self.db = db
        self.notifications = notifications or NotificationService(db)
        self.media = media or get_media_store()

    def get_post(self, post_id: str) -> Post:
        """Return a post or raise :class:`NotFoundError`."""
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def create_post(
        self,
        user_id: str,
        *,
        title: str,
        content: str,
        forum_id: str,
        images: list[dict[str, Any]] | None = None,
    ) -> Post:
        """Create a post, pending when the community validates posts first.

        An active post is counted in the community and author stats right
        away; a pending one is counted when it is validated.
        """
        author = get_user(self.db, user_id)
        if author is None or not author.can_author:
            raise ForbiddenError("Only verified professionals can publish posts")
        community = self.db.get(Community, forum_id)
        if community is None or community.is_deleted:
            raise NotFoundError("Community not found")

        now = utcnow()
        status = POST_STATUS_PENDING if community.requires_post_approval else POST_STATUS_ACTIVE
        post = Post(
            title=title.strip(),
            content=content,
            author_id=user_id,
            forum_id=forum_id,
            status=status,
            images=_normalize_images(images),
            comment_count=0,
            view_count=0,
            created_at=now,
        )
        self.db.add(post)
        if status == POST_STATUS_ACTIVE:
            increment_community(self.db, forum_id, extra={"last_post_at": now}, post_count=1)
            increment_user_stats(self.db, user_id, post_count=1, contribution_count=1)
        self.db.commit()

        logger.info("Post %s created in %s by %s (%s)", post.id, forum_id, user_id, status)
        return post

    def _require_editor(self, user_id: str, post: Post) -> bool:
        """Return whether ``user_id`` acts as a moderator on ``post``."""
        if post.author_id == user_id:
            return False
        if can_moderate_content(self.db, get_user(self.db, user_id), post.forum_id):
            return True
        raise ForbiddenError("You do not have permission to modify this post")

    async def edit_post(
        self,
        user_id: str,
        post_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
        images: list[dict[str, Any]] | None = None,
    ) -> PostEdit:
        """Update a post; images dropped from the list are deleted from the store."""
        post = self.get_post(post_id)
        self._require_editor(user_id, post)

        removed: list[str] = []
        if title is not None:
            post.title = title.strip()
        if content is not None:
            post.content = content
        if images is not None:
            new_images = _normalize_images(images)
            kept = {image["url"] for image in new_images}
            removed = [url for url in post.image_urls if url not in kept]
            post.images = new_images
        post.updated_at = utcnow()
        self.db.commit()

        failed = await self.media.delete_images(removed)
        return PostEdit(post=post, removed_images=removed, failed_images=failed)

    async def delete_post(self, user_id: str, post_id: str) -> PostDeletion:
        """Delete a post together with its comments and images.

        The steps commit one after another: comments, images, comment author
        stats, then the post with its own counters. Authors or communities
        that no longer exist are skipped.
        """
        post = self.get_post(post_id)
        moderator_deletion = self._require_editor(user_id, post)

        comments = list(self.db.scalars(select(Comment).where(Comment.post_id == post.id)))
        per_author = Counter(comment.author_id for comment in comments)
        if comments:
            self.db.execute(delete(Comment).where(Comment.post_id == post.id))
            self.db.commit()

        image_urls = post.image_urls
        failed_images = await self.media.delete_images(image_urls)

        updated_authors = 0
        for author_id, count in per_author.items():
            if increment_user_stats(
                self.db, author_id, comment_count=-count, contribution_count=-count
            ):
                updated_authors += 1
            else:
                logger.warning("Comment author %s not found; skipping stats", author_id)
        if per_author:
            self.db.commit()

        author_id = post.author_id
        title = post.title
        was_active = post.is_active
        self.db.delete(post)
        if was_active:
            if not increment_community(self.db, post.forum_id, post_count=-1):
                logger.warning("Community %s not found; skipping post count", post.forum_id)
            if not increment_user_stats(
                self.db, author_id, post_count=-1, contribution_count=-1
            ):
                logger.warning("Post author %s not found; skipping stats", author_id)
        self.db.commit()

        notified = False
        if moderator_deletion and get_user(self.db, author_id) is not None:
            notified = notify_safely(
                self.db,
                partial(self.notifications.send_post_deleted, author_id, title),
                event="post_deleted",
            )

        logger.info(
            "Post %s deleted by %s (%d comments, %d images)",
            post_id, user_id, len(comments), len(image_urls),
        )
        return PostDeletion(
            deleted_comments=len(comments),
            updated_authors=updated_authors,
            deleted_images=len(image_urls) - len(failed_images),
            moderator_deletion=moderator_deletion,
            notified=notified,
            failed_images=failed_images,
        )
