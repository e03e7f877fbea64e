"""Comment creation, editing and reply-tree deletion."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from functools import partial

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from colloquium.db.time import utcnow
from colloquium.models import Comment, Post
from colloquium.services.directory import get_user, increment_user_stats
from colloquium.services.errors import ForbiddenError, NotFoundError
from colloquium.services.notification_service import NotificationService, notify_safely
from colloquium.services.permissions import can_moderate_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommentDeletion:
    deleted_count: int
    is_moderator_action: bool
    notified: bool = False


class CommentService:
    """Service handling comments and their denormalized counters."""

    def __init__(self, db: Session, notifications: NotificationService | None = None) -> None:
        self.db = db
        self.notifications = notifications or NotificationService(db)

    def _get_comment(self, comment_id: str) -> Comment:
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    def list_comments(self, post_id: str) -> list[Comment]:
        """Return every comment of a post, oldest first."""
        if self.db.get(Post, post_id) is None:
            raise NotFoundError("Post not found")
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at, Comment.id)
        )
        return list(self.db.scalars(stmt))

    def create_comment(
        self,
        user_id: str,
        post_id: str,
        content: str,
        parent_comment_id: str | None = None,
    ) -> Comment:
        """Create a comment or reply and bump the post and author counters."""
        author = get_user(self.db, user_id)
        if author is None or not author.can_author:
            raise ForbiddenError("Only verified professionals can comment")
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if parent_comment_id is not None:
            parent = self.db.get(Comment, parent_comment_id)
            if parent is None or parent.post_id != post_id:
                raise NotFoundError("Parent comment not found")

        comment = Comment(
            content=content.strip(),
            author_id=user_id,
            post_id=post_id,
            parent_comment_id=parent_comment_id,
            like_count=0,
            created_at=utcnow(),
        )
        self.db.add(comment)
        post.comment_count = Post.comment_count + 1
        increment_user_stats(self.db, user_id, comment_count=1, contribution_count=1)
        self.db.commit()
        self.db.refresh(post)
        return comment

    def edit_comment(self, user_id: str, comment_id: str, content: str) -> Comment:
        """Replace the text of a comment; only its author may do this."""
        comment = self._get_comment(comment_id)
        if comment.author_id != user_id:
            raise ForbiddenError("You can only edit your own comments")
        comment.content = content.strip()
        comment.updated_at = utcnow()
        self.db.commit()
        return comment

    def _collect_subtree(self, root: Comment) -> list[Comment]:
        """Return ``root`` and every reply beneath it.

        Walks the tree with an explicit stack so deep threads cannot exhaust
        the interpreter's recursion limit.
        """
        children: dict[str | None, list[Comment]] = {}
        for comment in self.db.scalars(select(Comment).where(Comment.post_id == root.post_id)):
            children.setdefault(comment.parent_comment_id, []).append(comment)

        subtree: list[Comment] = []
        seen: set[str] = set()
        stack = [root]
        while stack:
            current = stack.pop()
            if current.id in seen:
                continue
            seen.add(current.id)
            subtree.append(current)
            stack.extend(children.get(current.id, []))
        return subtree

    def delete_comment(self, user_id: str, comment_id: str) -> CommentDeletion:
        """Delete a comment and all of its replies."""
        comment = self._get_comment(comment_id)
        post = self.db.get(Post, comment.post_id)

        is_moderator_action = False
        if comment.author_id != user_id:
            forum_id = post.forum_id if post is not None else None
            if not can_moderate_content(self.db, get_user(self.db, user_id), forum_id):
                raise ForbiddenError("You do not have permission to delete this comment")
            is_moderator_action = True

        subtree = self._collect_subtree(comment)
        per_author = Counter(c.author_id for c in subtree)
        author_id = comment.author_id

        self.db.execute(delete(Comment).where(Comment.id.in_([c.id for c in subtree])))
        for comment_author, count in per_author.items():
            if not increment_user_stats(
                self.db, comment_author, comment_count=-count, contribution_count=-count
            ):
                logger.warning("Comment author %s not found; skipping stats", comment_author)
        if post is not None:
            post.comment_count = Post.comment_count - len(subtree)
        self.db.commit()
        if post is not None:
            self.db.refresh(post)

        notified = False
        if is_moderator_action and get_user(self.db, author_id) is not None:
            notified = notify_safely(
                self.db,
                partial(self.notifications.send_comment_deleted, author_id, comment_id),
                event="comment_deleted",
            )

        logger.info("Comment %s deleted by %s (%d in subtree)", comment_id, user_id, len(subtree))
        return CommentDeletion(
            deleted_count=len(subtree),
            is_moderator_action=is_moderator_action,
            notified=notified,
        )
