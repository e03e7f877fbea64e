# mypy: ignore-errors
"""Tests for the membership state machine."""

import pytest

from colloquium.models import MembershipState
from colloquium.services.errors import ConflictError, InvalidTransitionError
from colloquium.services.membership import MembershipAction, can_transition, transition


@pytest.mark.parametrize(
    ("state", "action", "expected"),
    [
        (MembershipState.NONE, MembershipAction.JOIN, MembershipState.MEMBER),
        (MembershipState.NONE, MembershipAction.REQUEST, MembershipState.PENDING),
        (MembershipState.PENDING, MembershipAction.APPROVE, MembershipState.MEMBER),
        (MembershipState.PENDING, MembershipAction.REJECT, MembershipState.NONE),
        (MembershipState.MEMBER, MembershipAction.LEAVE, MembershipState.NONE),
        (MembershipState.MEMBER, MembershipAction.BAN, MembershipState.BANNED),
        (MembershipState.PENDING, MembershipAction.BAN, MembershipState.BANNED),
        (MembershipState.BANNED, MembershipAction.EXPIRE, MembershipState.NONE),
        (MembershipState.BANNED, MembershipAction.UNBAN, MembershipState.NONE),
    ],
)
def test_allowed_transitions(state, action, expected) -> None:
    """Every documented move lands in the expected state."""
    assert transition(state, action) == expected
    assert can_transition(state, action)


@pytest.mark.parametrize(
    ("state", "action"),
    [
        (MembershipState.BANNED, MembershipAction.JOIN),
        (MembershipState.BANNED, MembershipAction.APPROVE),
        (MembershipState.PENDING, MembershipAction.LEAVE),
        (MembershipState.MEMBER, MembershipAction.JOIN),
        (MembershipState.NONE, MembershipAction.APPROVE),
    ],
)
def test_illegal_transitions_raise(state, action) -> None:
    """Illegal moves are rejected before anything is written."""
    assert not can_transition(state, action)
    with pytest.raises(InvalidTransitionError) as exc_info:
        transition(state, action)
    assert isinstance(exc_info.value, ConflictError)
    assert state.value in exc_info.value.message
