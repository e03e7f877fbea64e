"""Community lifecycle: creation, membership, moderation, bans and deletion.

Every operation is a sequence of commits ("steps"). The community-side change
is committed first, then the user directory side, and notifications are sent
last on a best-effort basis. A failure between steps leaves the earlier steps
committed; counters are therefore eventually consistent across tables, never
within a single row.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from functools import partial

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from colloquium.core.settings import settings
from colloquium.db.ids import new_id
from colloquium.db.time import as_utc, utcnow
from colloquium.models import (
    BanDuration,
    Comment,
    Community,
    CommunityMembership,
    CommunityModerator,
    MembershipState,
    Post,
    User,
)
from colloquium.models.post import POST_STATUS_ACTIVE, POST_STATUS_PENDING
from colloquium.services import bans
from colloquium.services.directory import (
    get_user,
    increment_community,
    increment_user_stats,
    record_forum_joined,
    record_forum_left,
    require_user,
    user_snapshot,
)
from colloquium.services.errors import (
    AlreadyMemberError,
    AlreadyPendingError,
    BannedError,
    ConflictError,
    DuplicateNameError,
    ForbiddenError,
    NoPendingRequestError,
    NoSuccessorError,
    NotEligibleError,
    NotFoundError,
    NotMemberError,
    NotPendingError,
    OwnerCannotLeaveError,
)
from colloquium.services.media import MediaStore, get_media_store
from colloquium.services.membership import MembershipAction, transition
from colloquium.services.notification_service import NotificationService, notify_safely

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameCheck:
    """Outcome of a case-insensitive community name lookup."""

    exists: bool
    existing_name: str = ""


@dataclass
class CommunityDetails:
    """A community together with its embedded membership collections."""

    community: Community
    members: list[str]
    pending: list[CommunityMembership]
    moderators: list[CommunityModerator]
    bans: list[CommunityMembership]


@dataclass(frozen=True)
class JoinResult:
    requires_approval: bool


@dataclass(frozen=True)
class BanResult:
    ban: CommunityMembership
    was_member: bool
    notified: bool


@dataclass(frozen=True)
class BanStatus:
    is_banned: bool
    ban: CommunityMembership | None = None


@dataclass(frozen=True)
class OwnershipTransfer:
    new_owner_id: str
    previous_owner_id: str
    notified: bool


@dataclass(frozen=True)
class SettingsUpdateResult:
    """Counts reported back so callers can describe the side effects."""

    posts_activated: int = 0
    members_approved: int = 0


@dataclass(frozen=True)
class CommunityDeletion:
    deleted_posts: int
    deleted_comments: int
    updated_users: int
    failed_images: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PendingPost:
    post: Post
    author_name: str
    author_specialty: str | None


@dataclass(frozen=True)
class PostRejection:
    notified: bool
    failed_images: list[str] = field(default_factory=list)


class CommunityService:
    """Owns community creation, the membership state machine and moderation."""

    def __init__(
        self,
        db: Session,
        notifications: NotificationService | None = None,
        media: MediaStore | None = None,
    ) -> None:
        self.db = db
        self.notifications = notifications or NotificationService(db)
        self.media = media or get_media_store()

    # ------------------------------------------------------------------
    # Lookups and permission helpers
    # ------------------------------------------------------------------

    def get_community(self, community_id: str) -> Community:
        """Return a live community or raise :class:`NotFoundError`."""
        community = self.db.get(Community, community_id)
        if community is None or community.is_deleted:
            raise NotFoundError("Community not found")
        return community

    def _membership(self, community_id: str, user_id: str) -> CommunityMembership | None:
        return self.db.get(CommunityMembership, (community_id, user_id))

    def membership_state(self, community_id: str, user_id: str) -> MembershipState:
        """Return the current membership state of ``user_id``."""
        membership = self._membership(community_id, user_id)
        return membership.state if membership is not None else MembershipState.NONE

    def _moderator(self, community_id: str, user_id: str) -> CommunityModerator | None:
        return self.db.get(CommunityModerator, (community_id, user_id))

    def is_owner_or_moderator(self, community: Community, user_id: str) -> bool:
        """Return True when ``user_id`` governs ``community``."""
        if community.owner_id == user_id:
            return True
        return self._moderator(community.id, user_id) is not None

    def _require_owner_or_moderator(self, community: Community, actor_id: str, action: str) -> None:
        if not self.is_owner_or_moderator(community, actor_id):
            raise ForbiddenError(f"Only owners and moderators can {action}")

    @staticmethod
    def _require_owner(community: Community, actor_id: str, action: str) -> None:
        if community.owner_id != actor_id:
            raise ForbiddenError(f"Only the owner can {action}")

    def _notify(self, event: str, send: partial) -> bool:
        return notify_safely(self.db, send, event=event)

    def _members_with_state(
        self, community_id: str, state: MembershipState
    ) -> list[CommunityMembership]:
        stmt = select(CommunityMembership).where(
            CommunityMembership.community_id == community_id,
            CommunityMembership.state == state,
        )
        return list(self.db.scalars(stmt))

    # ------------------------------------------------------------------
    # Creation and reads
    # ------------------------------------------------------------------

    def check_name(self, name: str) -> NameCheck:
        """Look for a live community with the same name, ignoring case.

        Scans every non-deleted name; acceptable while the community count is small.
        """
        cleaned = name.strip().lower()
        names = self.db.scalars(select(Community.name).where(Community.is_deleted.is_(False)))
        for existing in names:
            if existing and existing.strip().lower() == cleaned:
                return NameCheck(exists=True, existing_name=existing)
        return NameCheck(exists=False)

    def create_community(
        self,
        owner_id: str,
        *,
        name: str,
        description: str,
        rules: str | None = None,
        requires_approval: bool = False,
        requires_post_approval: bool = False,
    ) -> Community:
        """Create a community owned and moderated by ``owner_id``."""
        require_user(self.db, owner_id)
        check = self.check_name(name)
        if check.exists:
            raise DuplicateNameError(f'A community named "{check.existing_name}" already exists')

        now = utcnow()
        community = Community(
            id=new_id(),
            name=name.strip(),
            description=description.strip(),
            rules=rules or settings.default_forum_rules,
            owner_id=owner_id,
            requires_approval=requires_approval,
            requires_post_approval=requires_post_approval,
            member_count=1,
            post_count=0,
            created_at=now,
        )
        self.db.add(community)
        self.db.add(
            CommunityMembership(
                community_id=community.id,
                user_id=owner_id,
                state=transition(MembershipState.NONE, MembershipAction.JOIN),
                joined_at=now,
            )
        )
        self.db.add(
            CommunityModerator(
                community_id=community.id,
                user_id=owner_id,
                added_at=now,
                added_by=owner_id,
            )
        )
        self.db.commit()

        increment_user_stats(self.db, owner_id, forum_count=1)
        record_forum_joined(self.db, owner_id, community.id)
        self.db.commit()

        logger.info("Community %s (%s) created by %s", community.id, community.name, owner_id)
        return community

    def get_community_details(self, community_id: str) -> CommunityDetails:
        """Return a community with its members, requests, moderators and bans."""
        community = self.get_community(community_id)
        memberships = list(
            self.db.scalars(
                select(CommunityMembership).where(CommunityMembership.community_id == community_id)
            )
        )
        moderators = list(
            self.db.scalars(
                select(CommunityModerator)
                .where(CommunityModerator.community_id == community_id)
                .order_by(CommunityModerator.added_at, CommunityModerator.user_id)
            )
        )
        return CommunityDetails(
            community=community,
            members=[m.user_id for m in memberships if m.state == MembershipState.MEMBER],
            pending=[m for m in memberships if m.state == MembershipState.PENDING],
            moderators=moderators,
            bans=[m for m in memberships if m.state == MembershipState.BANNED],
        )

    # ------------------------------------------------------------------
    # Ban ledger
    # ------------------------------------------------------------------

    def is_user_banned(self, community_id: str, user_id: str) -> bool:
        """Return True while ``user_id`` holds an unexpired ban.

        An expired ban is removed on the spot, so the first check after expiry
        both reports False and compacts the ledger.
        """
        membership = self._membership(community_id, user_id)
        if membership is None or membership.state != MembershipState.BANNED:
            return False

        duration = membership.ban_duration or BanDuration.PERMANENT
        if membership.banned_at is not None and bans.is_expired(membership.banned_at, duration):
            transition(membership.state, MembershipAction.EXPIRE)
            self.db.delete(membership)
            self.db.commit()
            logger.info("Expired %s ban of %s in %s removed", duration.value, user_id, community_id)
            return False
        return True

    def get_ban_status(self, community_id: str, user_id: str) -> BanStatus:
        """Return whether the user is banned, with the ban record when so."""
        if not self.is_user_banned(community_id, user_id):
            return BanStatus(is_banned=False)
        return BanStatus(is_banned=True, ban=self._membership(community_id, user_id))

    def ban_user(
        self,
        actor_id: str,
        community_id: str,
        target_id: str,
        reason: str,
        duration: str | BanDuration,
    ) -> BanResult:
        """Ban ``target_id``, dropping any membership, request or moderator role."""
        reason = bans.validate_reason(reason)
        ban_duration = bans.parse_duration(duration)
        community = self.get_community(community_id)
        self._require_owner_or_moderator(community, actor_id, "ban users")
        if target_id == community.owner_id:
            raise ForbiddenError("The community owner cannot be banned")

        membership = self._membership(community_id, target_id)
        current = membership.state if membership is not None else MembershipState.NONE
        new_state = transition(current, MembershipAction.BAN)
        was_member = current == MembershipState.MEMBER

        if membership is None:
            membership = CommunityMembership(community_id=community_id, user_id=target_id)
            self.db.add(membership)
        membership.state = new_state
        membership.joined_at = None
        membership.requested_at = None
        membership.banned_at = utcnow()
        membership.banned_by = actor_id
        membership.ban_reason = reason
        membership.ban_duration = ban_duration
        membership.user_snapshot = {
            **user_snapshot(get_user(self.db, target_id)),
            "forumId": community.id,
            "forumName": community.name,
        }

        moderator = self._moderator(community_id, target_id)
        if moderator is not None:
            self.db.delete(moderator)
        if was_member:
            increment_community(self.db, community_id, member_count=-1)
        self.db.commit()

        if was_member:
            record_forum_left(self.db, target_id, community_id)
            self.db.commit()

        notified = self._notify(
            "community_ban",
            partial(
                self.notifications.send_community_ban,
                target_id,
                community.name,
                reason,
                ban_duration,
            ),
        )
        logger.info(
            "User %s banned from %s by %s for %s", target_id, community_id, actor_id,
            ban_duration.value,
        )
        return BanResult(ban=membership, was_member=was_member, notified=notified)

    def unban_user(self, actor_id: str, community_id: str, target_id: str) -> bool:
        """Lift a ban whether or not it has expired.

        Returns True when a ban was removed; unbanning a user without a ban is
        a no-op.
        """
        community = self.get_community(community_id)
        self._require_owner_or_moderator(community, actor_id, "unban users")

        membership = self._membership(community_id, target_id)
        if membership is None or membership.state != MembershipState.BANNED:
            return False
        transition(membership.state, MembershipAction.UNBAN)
        self.db.delete(membership)
        self.db.commit()
        return True

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def join_community(self, user_id: str, community_id: str) -> JoinResult:
        """Join directly, or file a request when the community requires approval."""
        community = self.get_community(community_id)
        if self.is_user_banned(community_id, user_id):
            raise BannedError("You cannot join this community because you have been banned")

        current = self.membership_state(community_id, user_id)
        if current == MembershipState.MEMBER:
            raise AlreadyMemberError("You are already a member of this community")
        if current == MembershipState.PENDING:
            raise AlreadyPendingError("You already have a pending request")

        now = utcnow()
        if community.requires_approval:
            self.db.add(
                CommunityMembership(
                    community_id=community_id,
                    user_id=user_id,
                    state=transition(current, MembershipAction.REQUEST),
                    requested_at=now,
                    user_snapshot=user_snapshot(get_user(self.db, user_id)),
                )
            )
            self.db.commit()
            return JoinResult(requires_approval=True)

        self.db.add(
            CommunityMembership(
                community_id=community_id,
                user_id=user_id,
                state=transition(current, MembershipAction.JOIN),
                joined_at=now,
            )
        )
        increment_community(self.db, community_id, member_count=1)
        self.db.commit()

        record_forum_joined(self.db, user_id, community_id)
        self.db.commit()
        return JoinResult(requires_approval=False)

    def approve_member(self, actor_id: str, community_id: str, target_id: str) -> bool:
        """Admit a pending user. Returns whether the user was notified."""
        community = self.get_community(community_id)
        self._require_owner_or_moderator(community, actor_id, "approve members")
        if self.is_user_banned(community_id, target_id):
            raise ForbiddenError("Cannot approve this user because they are banned")

        membership = self._membership(community_id, target_id)
        if membership is None or membership.state != MembershipState.PENDING:
            raise NoPendingRequestError("There is no pending request for this user")

        membership.state = transition(membership.state, MembershipAction.APPROVE)
        membership.joined_at = utcnow()
        increment_community(self.db, community_id, member_count=1)
        self.db.commit()

        record_forum_joined(self.db, target_id, community_id)
        self.db.commit()

        return self._notify(
            "membership_approved",
            partial(
                self.notifications.send_membership_approved,
                target_id,
                community.id,
                community.name,
            ),
        )

    def reject_member(self, actor_id: str, community_id: str, target_id: str) -> None:
        """Discard a pending request. The user is not notified."""
        community = self.get_community(community_id)
        self._require_owner_or_moderator(community, actor_id, "reject members")

        membership = self._membership(community_id, target_id)
        if membership is None or membership.state != MembershipState.PENDING:
            raise NoPendingRequestError("There is no pending request for this user")
        transition(membership.state, MembershipAction.REJECT)
        self.db.delete(membership)
        self.db.commit()

    def leave_community(self, user_id: str, community_id: str) -> None:
        """Leave a community; the owner must transfer ownership instead."""
        community = self.get_community(community_id)
        membership = self._membership(community_id, user_id)
        if membership is None or membership.state != MembershipState.MEMBER:
            raise NotMemberError("You are not a member of this community")
        if community.owner_id == user_id:
            raise OwnerCannotLeaveError(
                "The owner cannot leave the community. Transfer ownership instead."
            )

        transition(membership.state, MembershipAction.LEAVE)
        self.db.delete(membership)
        moderator = self._moderator(community_id, user_id)
        if moderator is not None:
            self.db.delete(moderator)
        increment_community(self.db, community_id, member_count=-1)
        self.db.commit()

        record_forum_left(self.db, user_id, community_id)
        self.db.commit()

    # ------------------------------------------------------------------
    # Moderators and ownership
    # ------------------------------------------------------------------

    def add_moderator(self, actor_id: str, community_id: str, target_id: str) -> bool:
        """Promote a member with a professional role. Returns whether they were notified."""
        community = self.get_community(community_id)
        self._require_owner(community, actor_id, "add moderators")

        if self.membership_state(community_id, target_id) != MembershipState.MEMBER:
            raise NotEligibleError("The user must be a member of the community")
        target = get_user(self.db, target_id)
        if target is None or not target.is_professional:
            raise NotEligibleError("Only verified doctors can be moderators")
        if self._moderator(community_id, target_id) is not None:
            raise ConflictError("The user is already a moderator")

        self.db.add(
            CommunityModerator(
                community_id=community_id,
                user_id=target_id,
                added_at=utcnow(),
                added_by=actor_id,
            )
        )
        self.db.commit()

        return self._notify(
            "moderator_assigned",
            partial(
                self.notifications.send_moderator_assigned,
                target_id,
                community.id,
                community.name,
            ),
        )

    def remove_moderator(self, actor_id: str, community_id: str, target_id: str) -> None:
        """Revoke a moderator role; a no-op when the user is not a moderator."""
        community = self.get_community(community_id)
        self._require_owner(community, actor_id, "remove moderators")

        moderator = self._moderator(community_id, target_id)
        if moderator is not None:
            self.db.delete(moderator)
            self.db.commit()

    def transfer_ownership_and_leave(self, owner_id: str, community_id: str) -> OwnershipTransfer:
        """Hand the community to the longest-serving moderator and leave it.

        Ties on ``added_at`` go to the lexicographically smallest user id.
        """
        community = self.get_community(community_id)
        self._require_owner(community, owner_id, "transfer ownership")

        candidates = list(
            self.db.scalars(
                select(CommunityModerator).where(
                    CommunityModerator.community_id == community_id,
                    CommunityModerator.user_id != owner_id,
                )
            )
        )
        if not candidates:
            raise NoSuccessorError(
                "You cannot leave the community without a new owner. Add moderators first."
            )
        successor = min(candidates, key=lambda m: (as_utc(m.added_at), m.user_id))

        community.owner_id = successor.user_id
        community.updated_at = utcnow()
        own_moderator = self._moderator(community_id, owner_id)
        if own_moderator is not None:
            self.db.delete(own_moderator)
        membership = self._membership(community_id, owner_id)
        was_member = membership is not None and membership.state == MembershipState.MEMBER
        if was_member:
            transition(membership.state, MembershipAction.LEAVE)
            self.db.delete(membership)
            increment_community(self.db, community_id, member_count=-1)
        self.db.commit()

        if was_member:
            record_forum_left(self.db, owner_id, community_id)
            self.db.commit()

        notified = self._notify(
            "ownership_transferred",
            partial(
                self.notifications.send_ownership_transferred,
                successor.user_id,
                community.id,
                community.name,
            ),
        )
        logger.info(
            "Ownership of %s transferred from %s to %s", community_id, owner_id, successor.user_id
        )
        return OwnershipTransfer(
            new_owner_id=successor.user_id,
            previous_owner_id=owner_id,
            notified=notified,
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def update_settings(
        self,
        owner_id: str,
        community_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        rules: str | None = None,
        requires_approval: bool | None = None,
        requires_post_approval: bool | None = None,
    ) -> SettingsUpdateResult:
        """Apply setting changes; ``None`` leaves a setting untouched.

        Turning post approval off publishes every pending post, and turning
        membership approval off admits every pending user.
        """
        community = self.get_community(community_id)
        self._require_owner(community, owner_id, "change the community settings")

        was_requiring_posts = community.requires_post_approval
        was_requiring_members = community.requires_approval

        if name is not None:
            if name.strip().lower() != community.name.strip().lower():
                check = self.check_name(name)
                if check.exists:
                    raise DuplicateNameError(
                        f'A community named "{check.existing_name}" already exists'
                    )
            community.name = name.strip()
        if description is not None:
            community.description = description.strip()
        if rules is not None:
            community.rules = rules
        if requires_approval is not None:
            community.requires_approval = requires_approval
        if requires_post_approval is not None:
            community.requires_post_approval = requires_post_approval
        community.updated_at = utcnow()
        self.db.commit()

        posts_activated = 0
        if was_requiring_posts and requires_post_approval is False:
            posts_activated = self._activate_pending_posts(community, owner_id)

        members_approved = 0
        if was_requiring_members and requires_approval is False:
            members_approved = self._admit_pending_members(community)

        return SettingsUpdateResult(
            posts_activated=posts_activated,
            members_approved=members_approved,
        )

    def _activate_pending_posts(self, community: Community, actor_id: str) -> int:
        posts = list(
            self.db.scalars(
                select(Post)
                .where(Post.forum_id == community.id, Post.status == POST_STATUS_PENDING)
                .order_by(Post.created_at)
            )
        )
        if not posts:
            return 0

        now = utcnow()
        per_author: Counter[str] = Counter()
        for post in posts:
            post.status = POST_STATUS_ACTIVE
            post.validated_at = now
            post.validated_by = actor_id
            per_author[post.author_id] += 1

        increment_community(
            self.db, community.id, extra={"last_post_at": now}, post_count=len(posts)
        )
        for author_id, count in per_author.items():
            if not increment_user_stats(
                self.db, author_id, post_count=count, contribution_count=count
            ):
                logger.warning("Author %s not found; skipping post stats", author_id)
        self.db.commit()

        for post in posts:
            self._notify(
                "post_approved",
                partial(
                    self.notifications.send_post_approved,
                    post.author_id,
                    community.id,
                    community.name,
                ),
            )
        logger.info("Activated %d pending posts in %s", len(posts), community.id)
        return len(posts)

    def _admit_pending_members(self, community: Community) -> int:
        pending = self._members_with_state(community.id, MembershipState.PENDING)
        if not pending:
            return 0

        now = utcnow()
        for membership in pending:
            membership.state = transition(membership.state, MembershipAction.APPROVE)
            membership.joined_at = now
        increment_community(self.db, community.id, member_count=len(pending))
        self.db.commit()

        for membership in pending:
            record_forum_joined(self.db, membership.user_id, community.id)
        self.db.commit()

        for membership in pending:
            self._notify(
                "membership_approved",
                partial(
                    self.notifications.send_membership_approved,
                    membership.user_id,
                    community.id,
                    community.name,
                ),
            )
        logger.info("Admitted %d pending members in %s", len(pending), community.id)
        return len(pending)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def delete_community(
        self, actor_id: str, community_id: str, reason: str
    ) -> CommunityDeletion:
        """Delete a community with all of its posts and comments.

        Only platform moderators and administrators may do this. Each post is
        removed in its own step; stats of authors of active posts are then
        decremented, each member's joined-forum list is cleaned, and the
        community row goes last.
        """
        bans.validate_reason(reason)
        community = self.get_community(community_id)
        actor = get_user(self.db, actor_id)
        if actor is None or not actor.is_system_moderator:
            raise ForbiddenError("Only system administrators can delete communities")

        posts = list(self.db.scalars(select(Post).where(Post.forum_id == community_id)))
        deleted_comments = 0
        image_urls: list[str] = []
        per_author: Counter[str] = Counter()
        for post in posts:
            result = self.db.execute(delete(Comment).where(Comment.post_id == post.id))
            deleted_comments += result.rowcount or 0
            image_urls.extend(post.image_urls)
            if post.is_active:
                per_author[post.author_id] += 1
            self.db.delete(post)
            self.db.commit()

        failed_images = await self.media.delete_images(image_urls)

        for author_id, count in per_author.items():
            if not increment_user_stats(
                self.db, author_id, post_count=-count, contribution_count=-count
            ):
                logger.warning("Author %s not found; skipping post stats", author_id)
        self.db.commit()

        member_ids = select(CommunityMembership.user_id).where(
            CommunityMembership.community_id == community_id,
            CommunityMembership.state == MembershipState.MEMBER,
        )
        updated_users = 0
        now = utcnow()
        for user in self.db.scalars(select(User).where(User.id.in_(member_ids))).all():
            joined = list(user.joined_forums or [])
            if community_id not in joined:
                continue
            remaining = [fid for fid in joined if fid != community_id]
            user.joined_forums = remaining
            user.joined_forums_count = len(remaining)
            user.updated_at = now
            updated_users += 1
        if updated_users:
            self.db.commit()

        self.db.execute(
            delete(CommunityMembership).where(CommunityMembership.community_id == community_id)
        )
        self.db.execute(
            delete(CommunityModerator).where(CommunityModerator.community_id == community_id)
        )
        self.db.delete(community)
        self.db.commit()

        logger.info(
            "Community %s deleted by %s (%d posts, %d comments, %d users updated): %s",
            community_id, actor_id, len(posts), deleted_comments, updated_users, reason,
        )
        return CommunityDeletion(
            deleted_posts=len(posts),
            deleted_comments=deleted_comments,
            updated_users=updated_users,
            failed_images=failed_images,
        )

    # ------------------------------------------------------------------
    # Pending post review
    # ------------------------------------------------------------------

    def _get_community_post(self, community_id: str, post_id: str) -> Post:
        post = self.db.get(Post, post_id)
        if post is None or post.forum_id != community_id:
            raise NotFoundError("Post not found")
        return post

    def get_pending_posts(self, actor_id: str, community_id: str) -> list[PendingPost]:
        """List posts awaiting validation with their authors' names."""
        community = self.get_community(community_id)
        self._require_owner_or_moderator(community, actor_id, "view pending posts")

        posts = self.db.scalars(
            select(Post)
            .where(Post.forum_id == community_id, Post.status == POST_STATUS_PENDING)
            .order_by(Post.created_at)
        )
        pending: list[PendingPost] = []
        for post in posts:
            author = get_user(self.db, post.author_id)
            pending.append(
                PendingPost(
                    post=post,
                    author_name=author.display_name if author else "User",
                    author_specialty=author.specialty if author else None,
                )
            )
        return pending

    def validate_post(self, actor_id: str, community_id: str, post_id: str) -> bool:
        """Publish a pending post. Returns whether the author was notified."""
        community = self.get_community(community_id)
        self._require_owner_or_moderator(community, actor_id, "validate posts")
        post = self._get_community_post(community_id, post_id)
        if post.status != POST_STATUS_PENDING:
            raise NotPendingError("This post is not pending validation")

        now = utcnow()
        post.status = POST_STATUS_ACTIVE
        post.validated_at = now
        post.validated_by = actor_id
        increment_user_stats(self.db, post.author_id, post_count=1, contribution_count=1)
        increment_community(self.db, community_id, extra={"last_post_at": now}, post_count=1)
        self.db.commit()

        return self._notify(
            "post_approved",
            partial(
                self.notifications.send_post_approved,
                post.author_id,
                community.id,
                community.name,
            ),
        )

    async def reject_post(
        self,
        actor_id: str,
        community_id: str,
        post_id: str,
        reason: str | None = None,
    ) -> PostRejection:
        """Delete a pending post outright; it never touched any counter."""
        community = self.get_community(community_id)
        self._require_owner_or_moderator(community, actor_id, "reject posts")
        post = self._get_community_post(community_id, post_id)
        if post.status != POST_STATUS_PENDING:
            raise NotPendingError("This post is not pending validation")

        author_id = post.author_id
        image_urls = post.image_urls
        self.db.execute(delete(Comment).where(Comment.post_id == post.id))
        self.db.delete(post)
        self.db.commit()

        failed_images = await self.media.delete_images(image_urls)
        notified = self._notify(
            "post_rejected",
            partial(
                self.notifications.send_post_rejected,
                author_id,
                community.id,
                community.name,
                reason,
            ),
        )
        return PostRejection(notified=notified, failed_images=failed_images)
