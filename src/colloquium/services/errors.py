"""Domain errors raised by the community and content services.

Every error carries a human-readable message; the API layer maps each family
to an HTTP status code (see ``colloquium.api.v1.dependencies``).
"""

from __future__ import annotations


class ForumError(RuntimeError):
    """Base exception for all community/content failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ForumError):
    """Raised when a referenced entity does not exist."""


class NoPendingRequestError(NotFoundError):
    """Raised when approving or rejecting a user without a pending request."""


class ForbiddenError(ForumError):
    """Raised when a role, ownership or moderator check fails."""


class BannedError(ForbiddenError):
    """Raised when a banned user tries to enter a community."""


class NotEligibleError(ForbiddenError):
    """Raised when a user does not qualify for a community role."""


class ConflictError(ForumError):
    """Raised when the requested change conflicts with the current state."""


class DuplicateNameError(ConflictError):
    """Raised when a community name is already taken."""


class AlreadyMemberError(ConflictError):
    """Raised when joining a community the user already belongs to."""


class AlreadyPendingError(ConflictError):
    """Raised when a membership request is already awaiting review."""


class NotMemberError(ConflictError):
    """Raised when leaving a community the user does not belong to."""


class OwnerCannotLeaveError(ConflictError):
    """Raised when the owner tries to leave without transferring ownership."""


class NoSuccessorError(ConflictError):
    """Raised when ownership transfer finds no other moderator."""


class NotPendingError(ConflictError):
    """Raised when validating or rejecting a post that is not pending."""


class InvalidTransitionError(ConflictError):
    """Raised when a membership transition is not allowed from the current state."""


class InvalidInputError(ForumError):
    """Raised for malformed reasons, durations or content."""
