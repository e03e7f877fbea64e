"""Notification mailbox: emission, retention and read-state management."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from colloquium.core.settings import settings
from colloquium.db.time import as_utc, utcnow
from colloquium.models import BanDuration, Notification, NotificationType
from colloquium.services.bans import duration_label
from colloquium.services.errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupResult:
    """Number of notifications removed by :meth:`NotificationService.smart_cleanup`."""

    expired_deleted: int = 0
    old_deleted: int = 0


class NotificationService:
    """Per-user append-only mailbox with expiry and a size cap."""

    def __init__(
        self,
        db: Session,
        *,
        retention_days: int | None = None,
        max_per_user: int | None = None,
    ) -> None:
        self.db = db
        self.retention_days = retention_days or settings.notification_retention_days
        self.max_per_user = max_per_user or settings.notification_max_per_user

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def list_for_user(self, user_id: str) -> list[Notification]:
        """Return the user's notifications, newest first."""
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(
                Notification.created_at.desc(),
                Notification.sequence.desc(),
                Notification.id.desc(),
            )
        )
        return list(self.db.scalars(stmt))

    def _get_owned(self, user_id: str, notification_id: str) -> Notification:
        notification = self.db.get(Notification, notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification not found")
        return notification

    # ------------------------------------------------------------------
    # Retention
    # ------------------------------------------------------------------

    def smart_cleanup(self, user_id: str, *, reserve: int = 0) -> CleanupResult:
        """Drop expired notifications, then the oldest ones beyond the cap.

        Args:
            user_id: Mailbox owner.
            reserve: Slots to keep free below the cap for notifications about
                to be appended.
        """
        notifications = self.list_for_user(user_id)
        if not notifications:
            return CleanupResult()

        now = utcnow()
        expired = [n for n in notifications if as_utc(n.expires_at) <= now]
        expired_ids = {n.id for n in expired}
        remaining = [n for n in notifications if n.id not in expired_ids]

        keep = max(self.max_per_user - reserve, 0)
        overflow = remaining[keep:]

        doomed = [n.id for n in expired] + [n.id for n in overflow]
        if doomed:
            self.db.execute(delete(Notification).where(Notification.id.in_(doomed)))
            self.db.commit()
            logger.debug(
                "Mailbox cleanup for %s: %d expired, %d over cap",
                user_id, len(expired), len(overflow),
            )
        return CleanupResult(expired_deleted=len(expired), old_deleted=len(overflow))

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def send(
        self,
        user_id: str,
        notification_type: NotificationType,
        *,
        title: str,
        message: str,
        action_data: dict[str, Any] | None = None,
        is_actionable: bool = False,
    ) -> Notification:
        """Compact the mailbox and append a new notification."""
        self.smart_cleanup(user_id, reserve=1)

        created_at = utcnow()
        sequence = self.db.scalar(
            select(func.coalesce(func.max(Notification.sequence), 0)).where(
                Notification.user_id == user_id
            )
        )
        notification = Notification(
            user_id=user_id,
            sequence=sequence + 1,
            type=notification_type.value,
            title=title,
            message=message,
            is_read=False,
            is_actionable=is_actionable,
            action_data=action_data or {},
            created_at=created_at,
            expires_at=created_at + timedelta(days=self.retention_days),
        )
        self.db.add(notification)
        self.db.commit()
        return notification

    def send_membership_approved(self, user_id: str, forum_id: str, forum_name: str) -> Notification:
        return self.send(
            user_id,
            NotificationType.MEMBERSHIP_APPROVED,
            title="Request Approved",
            message=f'Your request to join "{forum_name}" has been approved. Welcome!',
            action_data={"forumId": forum_id, "forumName": forum_name},
        )

    def send_moderator_assigned(self, user_id: str, forum_id: str, forum_name: str) -> Notification:
        return self.send(
            user_id,
            NotificationType.MODERATOR_ASSIGNED,
            title="You Are Now a Moderator",
            message=(
                f'You have been made a moderator of "{forum_name}". '
                "You can now manage posts and members."
            ),
            action_data={"forumId": forum_id, "forumName": forum_name},
        )

    def send_ownership_transferred(self, user_id: str, forum_id: str, forum_name: str) -> Notification:
        return self.send(
            user_id,
            NotificationType.OWNERSHIP_TRANSFERRED,
            title="You Are Now the Owner",
            message=f'You are now the owner of "{forum_name}" and have full control.',
            action_data={"forumId": forum_id, "forumName": forum_name},
        )

    def send_community_ban(
        self,
        user_id: str,
        forum_name: str,
        reason: str,
        duration: BanDuration,
    ) -> Notification:
        return self.send(
            user_id,
            NotificationType.COMMUNITY_BAN,
            title="Banned from Community",
            message=(
                f'You have been banned from "{forum_name}". '
                f"Reason: {reason}. Duration: {duration_label(duration)}"
            ),
            action_data={"forumName": forum_name, "reason": reason, "duration": duration.value},
        )

    def send_post_approved(self, user_id: str, forum_id: str, forum_name: str) -> Notification:
        return self.send(
            user_id,
            NotificationType.POST_APPROVED,
            title="Post Approved",
            message=f'Your post in "{forum_name}" has been approved and is now visible to everyone.',
            action_data={"forumId": forum_id, "forumName": forum_name},
        )

    def send_post_rejected(
        self,
        user_id: str,
        forum_id: str,
        forum_name: str,
        reason: str | None = None,
    ) -> Notification:
        suffix = f". Reason: {reason}" if reason else ""
        return self.send(
            user_id,
            NotificationType.POST_REJECTED,
            title="Post Rejected",
            message=f'Your post in "{forum_name}" was rejected{suffix}',
            action_data={"forumId": forum_id, "forumName": forum_name, "reason": reason},
            is_actionable=True,
        )

    def send_post_deleted(self, user_id: str, post_title: str | None) -> Notification:
        title = post_title or "your post"
        return self.send(
            user_id,
            NotificationType.POST_DELETED,
            title="Post Deleted",
            message=f'Your post "{title}" was deleted by a moderator.',
            action_data={"postTitle": title},
        )

    def send_comment_deleted(
        self,
        user_id: str,
        comment_id: str,
        reason: str | None = None,
    ) -> Notification:
        suffix = f". Reason: {reason}" if reason else ""
        return self.send(
            user_id,
            NotificationType.COMMENT_DELETED,
            title="Comment Deleted",
            message=f"Your comment was deleted by a moderator{suffix}",
            action_data={"commentId": comment_id, "reason": reason},
        )

    # ------------------------------------------------------------------
    # Read state and deletion
    # ------------------------------------------------------------------

    def mark_as_read(self, user_id: str, notification_id: str) -> Notification:
        notification = self._get_owned(user_id, notification_id)
        notification.is_read = True
        self.db.commit()
        return notification

    def mark_all_as_read(self, user_id: str) -> int:
        unread = [n for n in self.list_for_user(user_id) if not n.is_read]
        for notification in unread:
            notification.is_read = True
        if unread:
            self.db.commit()
        return len(unread)

    def delete_notification(self, user_id: str, notification_id: str) -> None:
        notification = self._get_owned(user_id, notification_id)
        self.db.delete(notification)
        self.db.commit()

    def delete_all(self, user_id: str) -> int:
        return self._delete_matching(self.list_for_user(user_id))

    def delete_read(self, user_id: str) -> int:
        return self._delete_matching([n for n in self.list_for_user(user_id) if n.is_read])

    def _delete_matching(self, notifications: list[Notification]) -> int:
        if not notifications:
            return 0
        ids = [n.id for n in notifications]
        self.db.execute(delete(Notification).where(Notification.id.in_(ids)))
        self.db.commit()
        return len(ids)


def notify_safely(db: Session, send: Callable[[], object], *, event: str) -> bool:
    """Run a notification send as a best-effort side effect.

    Returns True on success. Database failures are logged, the session is
    rolled back and False is returned; the caller's operation has already
    committed and is not affected.
    """
    try:
        send()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Failed to deliver %s notification: %s", event, exc)
        return False
    return True
