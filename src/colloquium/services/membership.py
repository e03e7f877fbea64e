"""Membership state machine for (community, user) pairs.

A pair is always in exactly one :class:`MembershipState`. Services never edit
the stored state directly; they ask :func:`transition` for the next state so
that an illegal move (approving a banned user, leaving a pending request, ...)
fails before anything is written.
"""

from __future__ import annotations

import enum

from colloquium.models.community import MembershipState
from colloquium.services.errors import InvalidTransitionError


class MembershipAction(str, enum.Enum):
    """Events that move a pair between membership states."""

    REQUEST = "request"
    JOIN = "join"
    APPROVE = "approve"
    REJECT = "reject"
    LEAVE = "leave"
    BAN = "ban"
    UNBAN = "unban"
    EXPIRE = "expire"


_TRANSITIONS: dict[tuple[MembershipState, MembershipAction], MembershipState] = {
    (MembershipState.NONE, MembershipAction.REQUEST): MembershipState.PENDING,
    (MembershipState.NONE, MembershipAction.JOIN): MembershipState.MEMBER,
    (MembershipState.PENDING, MembershipAction.APPROVE): MembershipState.MEMBER,
    (MembershipState.PENDING, MembershipAction.REJECT): MembershipState.NONE,
    (MembershipState.MEMBER, MembershipAction.LEAVE): MembershipState.NONE,
    (MembershipState.NONE, MembershipAction.BAN): MembershipState.BANNED,
    (MembershipState.PENDING, MembershipAction.BAN): MembershipState.BANNED,
    (MembershipState.MEMBER, MembershipAction.BAN): MembershipState.BANNED,
    # Re-banning replaces the existing ban record.
    (MembershipState.BANNED, MembershipAction.BAN): MembershipState.BANNED,
    (MembershipState.BANNED, MembershipAction.UNBAN): MembershipState.NONE,
    (MembershipState.BANNED, MembershipAction.EXPIRE): MembershipState.NONE,
}


def transition(state: MembershipState, action: MembershipAction) -> MembershipState:
    """Return the state reached by applying ``action`` to ``state``.

    Raises:
        InvalidTransitionError: If the action is not allowed from ``state``.
    """
    try:
        return _TRANSITIONS[(state, action)]
    except KeyError:
        raise InvalidTransitionError(
            f"Cannot {action.value} a membership that is {state.value}"
        ) from None


def can_transition(state: MembershipState, action: MembershipAction) -> bool:
    """Return True when ``action`` is allowed from ``state``."""
    return (state, action) in _TRANSITIONS
