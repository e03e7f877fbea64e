"""Identifier generation for document-style primary keys."""

import uuid


def new_id() -> str:
    """Return a random 32-character hex identifier."""
    return uuid.uuid4().hex
