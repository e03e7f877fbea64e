"""Notification mailbox endpoints for the Colloquium API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from colloquium.schemas.notification import NotificationCountResponse, NotificationResponse
from colloquium.services.errors import ForumError

from ..dependencies import CurrentUserDep, NotificationServiceDep, http_error

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
) -> Any:
    """List the caller's notifications, newest first."""
    return service.list_for_user(current_user.id)


@router.put("/read-all", response_model=NotificationCountResponse)
async def mark_all_as_read(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
) -> NotificationCountResponse:
    return NotificationCountResponse(count=service.mark_all_as_read(current_user.id))


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: str,
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
) -> Any:
    try:
        return service.mark_as_read(current_user.id, notification_id)
    except ForumError as exc:
        raise http_error(exc) from exc


@router.delete("/read", response_model=NotificationCountResponse)
async def delete_read(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
) -> NotificationCountResponse:
    """Delete every notification the caller has already read."""
    return NotificationCountResponse(count=service.delete_read(current_user.id))


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
) -> dict[str, str]:
    try:
        service.delete_notification(current_user.id, notification_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {"status": "deleted"}


@router.delete("/", response_model=NotificationCountResponse)
async def delete_all(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
) -> NotificationCountResponse:
    """Empty the caller's mailbox."""
    return NotificationCountResponse(count=service.delete_all(current_user.id))
