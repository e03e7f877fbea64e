"""User directory access and denormalized counter updates.

Counter updates are issued as SQL-side increments (``col = col + n``) so two
requests touching the same row never lose each other's change. None of these
helpers commit; the calling service decides where each step ends.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from colloquium.models import Community, User
from colloquium.services.errors import NotFoundError

__all__ = [
    "get_user",
    "require_user",
    "user_snapshot",
    "increment_user_stats",
    "increment_community",
    "record_forum_joined",
    "record_forum_left",
]


def get_user(db: Session, user_id: str | None) -> User | None:
    """Return a directory entry by id, or None."""
    if not user_id:
        return None
    return db.get(User, user_id)


def require_user(db: Session, user_id: str) -> User:
    """Return a directory entry or raise :class:`NotFoundError`."""
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def user_snapshot(user: User | None) -> dict[str, Any]:
    """Capture the identity fields denormalized into requests and bans."""
    if user is None:
        return {"userEmail": "Email unavailable", "userName": "User", "userRole": "unverified"}
    return {
        "userEmail": user.email or "Email unavailable",
        "userName": user.display_name,
        "userRole": user.role,
    }


def increment_user_stats(db: Session, user_id: str | None, **deltas: int) -> bool:
    """Apply counter deltas to a user; return False when the user is gone.

    Example: ``increment_user_stats(db, uid, post_count=1, contribution_count=1)``.
    """
    if not user_id or not deltas:
        return False
    values = {name: getattr(User, name) + delta for name, delta in deltas.items()}
    result = db.execute(update(User).where(User.id == user_id).values(**values))
    return bool(result.rowcount)


def increment_community(
    db: Session,
    community_id: str | None,
    extra: dict[str, Any] | None = None,
    **deltas: int,
) -> bool:
    """Apply counter deltas (and plain ``extra`` values) to a community."""
    if not community_id:
        return False
    values: dict[str, Any] = {
        name: getattr(Community, name) + delta for name, delta in deltas.items()
    }
    values.update(extra or {})
    if not values:
        return False
    result = db.execute(update(Community).where(Community.id == community_id).values(**values))
    return bool(result.rowcount)


def record_forum_joined(db: Session, user_id: str, forum_id: str) -> bool:
    """Add ``forum_id`` to the user's joined forums and bump the count once."""
    user = get_user(db, user_id)
    if user is None:
        return False
    joined = list(user.joined_forums or [])
    if forum_id in joined:
        return True
    user.joined_forums = [*joined, forum_id]
    increment_user_stats(db, user_id, joined_forums_count=1)
    return True


def record_forum_left(db: Session, user_id: str, forum_id: str) -> bool:
    """Remove ``forum_id`` from the user's joined forums and drop the count once."""
    user = get_user(db, user_id)
    if user is None:
        return False
    joined = list(user.joined_forums or [])
    if forum_id not in joined:
        return True
    user.joined_forums = [fid for fid in joined if fid != forum_id]
    increment_user_stats(db, user_id, joined_forums_count=-1)
    return True
