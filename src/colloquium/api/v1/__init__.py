"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    communities_router,
    notifications_router,
    posts_router,
    reports_router,
)

__all__ = [
    "comments_router",
    "communities_router",
    "notifications_router",
    "posts_router",
    "reports_router",
]
