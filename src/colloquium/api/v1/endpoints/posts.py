"""Post-related endpoints for the Colloquium API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from colloquium.schemas.comment import CommentResponse
from colloquium.schemas.post import PostCreate, PostDeletionResponse, PostResponse, PostUpdate
from colloquium.services.errors import ForumError

from ..dependencies import CommentServiceDep, CurrentUserDep, PostServiceDep, http_error

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> Any:
    """Create a post; it stays pending when the community validates posts."""
    try:
        return service.create_post(
            current_user.id,
            title=payload.title,
            content=payload.content,
            forum_id=payload.forum_id,
            images=[image.model_dump(exclude_none=True) for image in payload.images],
        )
    except ForumError as exc:
        raise http_error(exc) from exc


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, service: PostServiceDep) -> Any:
    """Get a specific post by ID."""
    try:
        return service.get_post(post_id)
    except ForumError as exc:
        raise http_error(exc) from exc


@router.put("/{post_id}", response_model=PostResponse)
async def edit_post(
    post_id: str,
    payload: PostUpdate,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> Any:
    """Edit a post's title, content or images."""
    images = None
    if payload.images is not None:
        images = [image.model_dump(exclude_none=True) for image in payload.images]
    try:
        result = await service.edit_post(
            current_user.id,
            post_id,
            title=payload.title,
            content=payload.content,
            images=images,
        )
    except ForumError as exc:
        raise http_error(exc) from exc
    return result.post


@router.delete("/{post_id}", response_model=PostDeletionResponse)
async def delete_post(
    post_id: str,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> PostDeletionResponse:
    """Delete a post with its comments and images."""
    try:
        result = await service.delete_post(current_user.id, post_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return PostDeletionResponse(
        deleted_comments=result.deleted_comments,
        updated_authors=result.updated_authors,
        deleted_images=result.deleted_images,
        moderator_deletion=result.moderator_deletion,
        failed_images=result.failed_images,
    )


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: str, service: CommentServiceDep) -> Any:
    """List the comments of a post, oldest first."""
    try:
        return service.list_comments(post_id)
    except ForumError as exc:
        raise http_error(exc) from exc
