"""Permission checks shared by the content services."""

from __future__ import annotations

from sqlalchemy.orm import Session

from colloquium.models import Community, CommunityModerator, User


def is_community_moderator(db: Session, community_id: str | None, user_id: str) -> bool:
    """Return True when ``user_id`` owns or moderates the community."""
    if not community_id:
        return False
    community = db.get(Community, community_id)
    if community is None:
        return False
    if community.owner_id == user_id:
        return True
    return db.get(CommunityModerator, (community_id, user_id)) is not None


def can_moderate_content(db: Session, user: User | None, community_id: str | None) -> bool:
    """Return True when ``user`` may edit or delete other people's content.

    Platform moderators and administrators qualify everywhere; community owners
    and moderators qualify inside their community.
    """
    if user is None:
        return False
    if user.is_system_moderator:
        return True
    return is_community_moderator(db, community_id, user.id)
