"""Engine and session factory for the forum database."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from colloquium.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Model modules register their tables on Base.metadata when imported.
import colloquium.models  # noqa: E402,F401


def _connect_args(url: str) -> dict[str, Any]:
    # FastAPI serves sync dependencies from a threadpool.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.effective_database_url,
    connect_args=_connect_args(settings.effective_database_url),
    pool_pre_ping=True,
    echo=settings.sql_debug,
)

# Services hand committed rows straight to response models.
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
