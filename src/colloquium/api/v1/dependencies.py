"""Shared API dependencies for authentication, services and error mapping."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from colloquium.core.security import decode_subject
from colloquium.db.session import get_db
from colloquium.models import User
from colloquium.services.comment_service import CommentService
from colloquium.services.community_service import CommunityService
from colloquium.services.errors import (
    ConflictError,
    ForbiddenError,
    ForumError,
    InvalidInputError,
    NotFoundError,
)
from colloquium.services.media import MediaStore, get_media_store
from colloquium.services.notification_service import NotificationService
from colloquium.services.post_service import PostService
from colloquium.services.report_service import ReportService

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        subject = decode_subject(credentials.credentials)
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.get(User, subject)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_media_store_dep() -> MediaStore:
    """Return the shared media store (overridable in tests)."""
    return get_media_store()


MediaStoreDep = Annotated[MediaStore, Depends(get_media_store_dep)]


def get_notification_service(db: SessionDep) -> NotificationService:
    return NotificationService(db)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def get_community_service(
    db: SessionDep,
    notifications: NotificationServiceDep,
    media: MediaStoreDep,
) -> CommunityService:
    return CommunityService(db, notifications=notifications, media=media)


def get_post_service(
    db: SessionDep,
    notifications: NotificationServiceDep,
    media: MediaStoreDep,
) -> PostService:
    return PostService(db, notifications=notifications, media=media)


def get_comment_service(db: SessionDep, notifications: NotificationServiceDep) -> CommentService:
    return CommentService(db, notifications=notifications)


CommunityServiceDep = Annotated[CommunityService, Depends(get_community_service)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


def get_report_service(
    db: SessionDep,
    posts: PostServiceDep,
    comments: CommentServiceDep,
) -> ReportService:
    return ReportService(db, posts=posts, comments=comments)


ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]


_STATUS_BY_ERROR: tuple[tuple[type[ForumError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
)


def http_error(exc: ForumError) -> HTTPException:
    """Translate a service error into the matching HTTP error."""
    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
