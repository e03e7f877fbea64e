"""Database session, identifiers and time helpers."""

from .ids import new_id
from .session import Base, SessionLocal, get_db

__all__ = ["Base", "SessionLocal", "get_db", "new_id"]
