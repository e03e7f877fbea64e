"""Community-related endpoints for the Colloquium API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from colloquium.schemas.community import (
    BanCreate,
    BanResponse,
    BanStatusResponse,
    CommunityCreate,
    CommunityDelete,
    CommunityDeletionResponse,
    CommunityDetailResponse,
    CommunityNameCheck,
    CommunityNameCheckResponse,
    CommunityResponse,
    CommunitySettingsUpdate,
    ModeratorResponse,
    PendingRequestResponse,
    PostRejectRequest,
    SettingsUpdateResponse,
)
from colloquium.schemas.post import PendingPostResponse, PostResponse
from colloquium.services.community_service import CommunityDetails
from colloquium.services.errors import ForumError

from ..dependencies import CommunityServiceDep, CurrentUserDep, http_error

router = APIRouter(prefix="/communities", tags=["communities"])


def _detail_response(details: CommunityDetails) -> CommunityDetailResponse:
    base = CommunityResponse.model_validate(details.community).model_dump()
    return CommunityDetailResponse(
        **base,
        members=details.members,
        pending_requests=[PendingRequestResponse.model_validate(m) for m in details.pending],
        moderators=[ModeratorResponse.model_validate(m) for m in details.moderators],
        bans=[BanResponse.model_validate(m) for m in details.bans],
    )


@router.post("/", response_model=CommunityResponse, status_code=status.HTTP_201_CREATED)
async def create_community(
    payload: CommunityCreate,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> Any:
    """Create a new community owned by the caller."""
    try:
        return service.create_community(
            current_user.id,
            name=payload.name,
            description=payload.description,
            rules=payload.rules,
            requires_approval=payload.requires_approval,
            requires_post_approval=payload.requires_post_approval,
        )
    except ForumError as exc:
        raise http_error(exc) from exc


@router.post("/check-name", response_model=CommunityNameCheckResponse)
async def check_name(
    payload: CommunityNameCheck,
    _current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> CommunityNameCheckResponse:
    """Report whether a community name is already taken."""
    result = service.check_name(payload.name)
    return CommunityNameCheckResponse(exists=result.exists, existing_name=result.existing_name)


@router.get("/{community_id}", response_model=CommunityDetailResponse)
async def get_community(community_id: str, service: CommunityServiceDep) -> Any:
    """Get a community with its members, pending requests, moderators and bans."""
    try:
        return _detail_response(service.get_community_details(community_id))
    except ForumError as exc:
        raise http_error(exc) from exc


@router.put("/{community_id}/settings", response_model=SettingsUpdateResponse)
async def update_settings(
    community_id: str,
    payload: CommunitySettingsUpdate,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> SettingsUpdateResponse:
    """Change community settings (owner only)."""
    try:
        result = service.update_settings(
            current_user.id,
            community_id,
            **payload.model_dump(exclude_unset=True),
        )
        community = service.get_community(community_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return SettingsUpdateResponse(
        community=CommunityResponse.model_validate(community),
        posts_activated=result.posts_activated,
        members_approved=result.members_approved,
    )


@router.delete("/{community_id}", response_model=CommunityDeletionResponse)
async def delete_community(
    community_id: str,
    payload: CommunityDelete,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> CommunityDeletionResponse:
    """Delete a community and all of its content (platform moderators only)."""
    try:
        result = await service.delete_community(current_user.id, community_id, payload.reason)
    except ForumError as exc:
        raise http_error(exc) from exc
    return CommunityDeletionResponse(
        deleted_posts=result.deleted_posts,
        deleted_comments=result.deleted_comments,
        updated_users=result.updated_users,
        failed_images=result.failed_images,
    )


@router.post("/{community_id}/join")
async def join_community(
    community_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> dict[str, Any]:
    """Join a community or request to join it."""
    try:
        result = service.join_community(current_user.id, community_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {
        "status": "pending" if result.requires_approval else "joined",
        "requires_approval": result.requires_approval,
    }


@router.post("/{community_id}/leave")
async def leave_community(
    community_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> dict[str, str]:
    """Leave a community."""
    try:
        service.leave_community(current_user.id, community_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {"status": "left"}


@router.post("/{community_id}/transfer-ownership")
async def transfer_ownership(
    community_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> dict[str, Any]:
    """Hand the community to the longest-serving moderator and leave it."""
    try:
        result = service.transfer_ownership_and_leave(current_user.id, community_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {"new_owner_id": result.new_owner_id, "notified": result.notified}


@router.post("/{community_id}/members/{user_id}/approve")
async def approve_member(
    community_id: str,
    user_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> dict[str, Any]:
    """Approve a pending membership request."""
    try:
        notified = service.approve_member(current_user.id, community_id, user_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {"status": "approved", "notified": notified}


@router.post("/{community_id}/members/{user_id}/reject")
async def reject_member(
    community_id: str,
    user_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> dict[str, str]:
    """Reject a pending membership request."""
    try:
        service.reject_member(current_user.id, community_id, user_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {"status": "rejected"}


@router.post("/{community_id}/moderators/{user_id}", status_code=status.HTTP_201_CREATED)
async def add_moderator(
    community_id: str,
    user_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> dict[str, Any]:
    """Promote a member to moderator (owner only)."""
    try:
        notified = service.add_moderator(current_user.id, community_id, user_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {"status": "added", "notified": notified}


@router.delete("/{community_id}/moderators/{user_id}")
async def remove_moderator(
    community_id: str,
    user_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> dict[str, str]:
    """Revoke a moderator role (owner only)."""
    try:
        service.remove_moderator(current_user.id, community_id, user_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {"status": "removed"}


@router.post("/{community_id}/bans", response_model=BanResponse, status_code=status.HTTP_201_CREATED)
async def ban_user(
    community_id: str,
    payload: BanCreate,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> Any:
    """Ban a user from the community."""
    try:
        result = service.ban_user(
            current_user.id,
            community_id,
            payload.user_id,
            payload.reason,
            payload.duration,
        )
    except ForumError as exc:
        raise http_error(exc) from exc
    return result.ban


@router.delete("/{community_id}/bans/{user_id}")
async def unban_user(
    community_id: str,
    user_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> dict[str, bool]:
    """Lift a ban; succeeds even when the user is not banned."""
    try:
        removed = service.unban_user(current_user.id, community_id, user_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {"removed": removed}


@router.get("/{community_id}/bans/{user_id}", response_model=BanStatusResponse)
async def get_ban_status(
    community_id: str,
    user_id: str,
    _current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> BanStatusResponse:
    """Report whether a user is currently banned from the community."""
    result = service.get_ban_status(community_id, user_id)
    ban = BanResponse.model_validate(result.ban) if result.ban is not None else None
    return BanStatusResponse(is_banned=result.is_banned, ban=ban)


@router.get("/{community_id}/pending-posts", response_model=list[PendingPostResponse])
async def list_pending_posts(
    community_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> list[PendingPostResponse]:
    """List posts awaiting validation (owners and moderators)."""
    try:
        pending = service.get_pending_posts(current_user.id, community_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return [
        PendingPostResponse(
            post=PostResponse.model_validate(item.post),
            author_name=item.author_name,
            author_specialty=item.author_specialty,
        )
        for item in pending
    ]


@router.post("/{community_id}/posts/{post_id}/validate")
async def validate_post(
    community_id: str,
    post_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
) -> dict[str, Any]:
    """Publish a pending post."""
    try:
        notified = service.validate_post(current_user.id, community_id, post_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {"status": "active", "notified": notified}


@router.post("/{community_id}/posts/{post_id}/reject")
async def reject_post(
    community_id: str,
    post_id: str,
    current_user: CurrentUserDep,
    service: CommunityServiceDep,
    payload: PostRejectRequest | None = None,
) -> dict[str, Any]:
    """Reject and delete a pending post."""
    reason = payload.reason if payload is not None else None
    try:
        result = await service.reject_post(current_user.id, community_id, post_id, reason)
    except ForumError as exc:
        raise http_error(exc) from exc
    return {
        "status": "rejected",
        "notified": result.notified,
        "failed_images": result.failed_images,
    }
