"""Content report queue reviewed by platform moderators."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from colloquium.db.time import utcnow
from colloquium.models import Comment, Community, Post, Report, User
from colloquium.models.report import ReportStatus, ReportType, ReportUrgency
from colloquium.services.comment_service import CommentDeletion, CommentService
from colloquium.services.directory import get_user, require_user
from colloquium.services.errors import ForbiddenError, InvalidInputError, NotFoundError
from colloquium.services.post_service import PostDeletion, PostService

logger = logging.getLogger(__name__)

E = TypeVar("E", ReportType, ReportStatus, ReportUrgency)

MIN_DESCRIPTION_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 100
CONTENT_DELETED_RESOLUTION = "Content deleted by moderator"

_TYPE_LABELS = {
    ReportType.POST: "post",
    ReportType.COMMENT: "comment",
    ReportType.USER: "user",
    ReportType.PROFILE: "profile",
    ReportType.FORUM: "community",
}


@dataclass(frozen=True)
class ReportedContentDeletion:
    """Outcome of deleting the content behind a report."""

    report: Report
    content_type: ReportType
    post: PostDeletion | None = None
    comment: CommentDeletion | None = None

    @property
    def deleted_comments(self) -> int:
        if self.post is not None:
            return self.post.deleted_comments
        if self.comment is not None:
            return self.comment.deleted_count
        return 0


def _coerce(enum_cls: type[E], value: E | str, label: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidInputError(f"Invalid {label}; expected one of: {allowed}") from None


class ReportService:
    """Files reports and lets system moderators work through them.

    Deleting reported content goes through the regular post and comment
    cascades, so counters and notifications behave exactly as for a
    moderator deleting the content directly.
    """

    def __init__(
        self,
        db: Session,
        posts: PostService | None = None,
        comments: CommentService | None = None,
    ) -> None:
        self.db = db
        self.posts = posts or PostService(db)
        self.comments = comments or CommentService(db, notifications=self.posts.notifications)

    def _require_system_moderator(self, user_id: str) -> User:
        user = require_user(self.db, user_id)
        if not user.is_system_moderator:
            raise ForbiddenError("Only platform moderators can review reports")
        return user

    def _get_report(self, report_id: str) -> Report:
        report = self.db.get(Report, report_id)
        if report is None:
            raise NotFoundError("Report not found")
        return report

    def _target_exists(self, report_type: ReportType, target_id: str) -> bool:
        model: type[Any] = {
            ReportType.POST: Post,
            ReportType.COMMENT: Comment,
            ReportType.USER: User,
            ReportType.PROFILE: User,
            ReportType.FORUM: Community,
        }[report_type]
        return self.db.get(model, target_id) is not None

    def _target_context(self, report_type: ReportType, target_id: str) -> dict[str, Any]:
        """Collect the denormalized fields describing the reported entity."""
        if report_type is ReportType.POST:
            post = self.db.get(Post, target_id)
            author = get_user(self.db, post.author_id)
            community = self.db.get(Community, post.forum_id)
            return {
                "target_name": post.title or "Untitled post",
                "target_author_id": post.author_id,
                "target_author_name": author.display_name if author else None,
                "forum_id": post.forum_id,
                "forum_name": community.name if community else None,
            }
        if report_type is ReportType.COMMENT:
            comment = self.db.get(Comment, target_id)
            author = get_user(self.db, comment.author_id)
            post = self.db.get(Post, comment.post_id)
            return {
                "target_name": "Comment",
                "target_author_id": comment.author_id,
                "target_author_name": author.display_name if author else None,
                "post_id": comment.post_id,
                "post_title": post.title if post else None,
            }
        if report_type is ReportType.FORUM:
            community = self.db.get(Community, target_id)
            owner = get_user(self.db, community.owner_id)
            return {
                "target_name": community.name,
                "target_author_id": community.owner_id,
                "target_author_name": owner.display_name if owner else None,
            }
        user = self.db.get(User, target_id)
        return {
            "target_name": user.display_name,
            "target_author_id": user.id,
            "target_author_name": user.display_name,
        }

    def create_report(
        self,
        user_id: str,
        *,
        report_type: ReportType | str,
        target_id: str,
        reason: str,
        description: str,
        urgency: ReportUrgency | str = ReportUrgency.MEDIUM,
        target_name: str | None = None,
    ) -> Report:
        """File a report against a post, comment, user, profile or community."""
        reporter = require_user(self.db, user_id)
        report_type = _coerce(ReportType, report_type, "report type")
        if not reason or not reason.strip():
            raise InvalidInputError("A report reason is required")
        cleaned = (description or "").strip()
        if len(cleaned) < MIN_DESCRIPTION_LENGTH:
            raise InvalidInputError(
                f"The description must be at least {MIN_DESCRIPTION_LENGTH} characters"
            )
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise InvalidInputError(
                f"The description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
            )
        if not self._target_exists(report_type, target_id):
            raise NotFoundError(
                f"The reported {_TYPE_LABELS[report_type]} does not exist or was deleted"
            )

        context = self._target_context(report_type, target_id)
        if target_name:
            context["target_name"] = target_name
        now = utcnow()
        report = Report(
            type=report_type,
            target_id=target_id,
            reporter_id=reporter.id,
            reporter_name=reporter.display_name,
            reporter_email=reporter.email,
            reason=reason.strip(),
            description=cleaned,
            urgency=_coerce(ReportUrgency, urgency, "urgency"),
            status=ReportStatus.PENDING,
            created_at=now,
            updated_at=now,
            **context,
        )
        self.db.add(report)
        self.db.commit()

        logger.info(
            "Report %s filed by %s against %s %s",
            report.id, user_id, report_type.value, target_id,
        )
        return report

    def list_reports(
        self,
        user_id: str,
        *,
        status: ReportStatus | str | None = None,
        report_type: ReportType | str | None = None,
    ) -> list[Report]:
        """Return reports newest first, optionally filtered by status and type."""
        self._require_system_moderator(user_id)
        stmt = select(Report)
        if status is not None:
            stmt = stmt.where(Report.status == _coerce(ReportStatus, status, "report status"))
        if report_type is not None:
            stmt = stmt.where(Report.type == _coerce(ReportType, report_type, "report type"))
        stmt = stmt.order_by(Report.created_at.desc(), Report.id.desc())
        return list(self.db.scalars(stmt))

    def _close(
        self, user_id: str, report_id: str, status: ReportStatus, resolution: str
    ) -> Report:
        self._require_system_moderator(user_id)
        report = self._get_report(report_id)
        if not resolution or not resolution.strip():
            raise InvalidInputError("A resolution note is required")
        now = utcnow()
        report.status = status
        report.resolution = resolution.strip()
        report.resolved_at = now
        report.resolved_by = user_id
        report.updated_at = now
        self.db.commit()
        logger.info("Report %s %s by %s", report_id, status.value, user_id)
        return report

    def resolve_report(self, user_id: str, report_id: str, resolution: str) -> Report:
        return self._close(user_id, report_id, ReportStatus.RESOLVED, resolution)

    def dismiss_report(self, user_id: str, report_id: str, reason: str) -> Report:
        return self._close(user_id, report_id, ReportStatus.DISMISSED, reason)

    async def delete_reported_content(
        self, user_id: str, report_id: str
    ) -> ReportedContentDeletion:
        """Delete the post or comment a report points at and resolve the report.

        Only posts and comments can be removed this way; reports about users
        or communities are handled through their own flows.
        """
        self._require_system_moderator(user_id)
        report = self._get_report(report_id)
        if not self._target_exists(report.type, report.target_id):
            raise NotFoundError("The reported content no longer exists")

        post_result: PostDeletion | None = None
        comment_result: CommentDeletion | None = None
        if report.type is ReportType.POST:
            post_result = await self.posts.delete_post(user_id, report.target_id)
        elif report.type is ReportType.COMMENT:
            comment_result = self.comments.delete_comment(user_id, report.target_id)
        else:
            raise InvalidInputError("Only reported posts and comments can be deleted")

        report = self.resolve_report(user_id, report_id, CONTENT_DELETED_RESOLUTION)
        return ReportedContentDeletion(
            report=report,
            content_type=report.type,
            post=post_result,
            comment=comment_result,
        )
