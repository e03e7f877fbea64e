"""Comment-related endpoints for the Colloquium API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from colloquium.schemas.comment import (
    CommentCreate,
    CommentDeletionResponse,
    CommentResponse,
    CommentUpdate,
)
from colloquium.services.errors import ForumError

from ..dependencies import CommentServiceDep, CurrentUserDep, http_error

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    current_user: CurrentUserDep,
    service: CommentServiceDep,
) -> Any:
    """Comment on a post or reply to another comment."""
    try:
        return service.create_comment(
            current_user.id,
            payload.post_id,
            payload.content,
            payload.parent_comment_id,
        )
    except ForumError as exc:
        raise http_error(exc) from exc


@router.put("/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    comment_id: str,
    payload: CommentUpdate,
    current_user: CurrentUserDep,
    service: CommentServiceDep,
) -> Any:
    try:
        return service.edit_comment(current_user.id, comment_id, payload.content)
    except ForumError as exc:
        raise http_error(exc) from exc


@router.delete("/{comment_id}", response_model=CommentDeletionResponse)
async def delete_comment(
    comment_id: str,
    current_user: CurrentUserDep,
    service: CommentServiceDep,
) -> CommentDeletionResponse:
    """Delete a comment and every reply beneath it."""
    try:
        result = service.delete_comment(current_user.id, comment_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return CommentDeletionResponse(
        deleted_count=result.deleted_count,
        is_moderator_action=result.is_moderator_action,
    )
