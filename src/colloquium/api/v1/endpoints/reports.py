"""Content report endpoints for the Colloquium API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from colloquium.models.report import ReportStatus, ReportType
from colloquium.schemas.report import (
    ReportCreate,
    ReportDismiss,
    ReportedContentDeletionResponse,
    ReportResolve,
    ReportResponse,
)
from colloquium.services.errors import ForumError

from ..dependencies import CurrentUserDep, ReportServiceDep, http_error

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    payload: ReportCreate,
    current_user: CurrentUserDep,
    service: ReportServiceDep,
) -> Any:
    """Report a post, comment, user, profile or community."""
    try:
        return service.create_report(
            current_user.id,
            report_type=payload.type,
            target_id=payload.target_id,
            reason=payload.reason,
            description=payload.description,
            urgency=payload.urgency,
            target_name=payload.target_name,
        )
    except ForumError as exc:
        raise http_error(exc) from exc


@router.get("/", response_model=list[ReportResponse])
async def list_reports(
    current_user: CurrentUserDep,
    service: ReportServiceDep,
    report_status: ReportStatus | None = Query(None, alias="status"),
    report_type: ReportType | None = Query(None, alias="type"),
) -> Any:
    """List reports for platform moderators, newest first."""
    try:
        return service.list_reports(
            current_user.id, status=report_status, report_type=report_type
        )
    except ForumError as exc:
        raise http_error(exc) from exc


@router.put("/{report_id}/resolve", response_model=ReportResponse)
async def resolve_report(
    report_id: str,
    payload: ReportResolve,
    current_user: CurrentUserDep,
    service: ReportServiceDep,
) -> Any:
    try:
        return service.resolve_report(current_user.id, report_id, payload.resolution)
    except ForumError as exc:
        raise http_error(exc) from exc


@router.put("/{report_id}/dismiss", response_model=ReportResponse)
async def dismiss_report(
    report_id: str,
    payload: ReportDismiss,
    current_user: CurrentUserDep,
    service: ReportServiceDep,
) -> Any:
    try:
        return service.dismiss_report(current_user.id, report_id, payload.reason)
    except ForumError as exc:
        raise http_error(exc) from exc


@router.delete("/{report_id}/content", response_model=ReportedContentDeletionResponse)
async def delete_reported_content(
    report_id: str,
    current_user: CurrentUserDep,
    service: ReportServiceDep,
) -> ReportedContentDeletionResponse:
    """Delete the reported post or comment and resolve the report."""
    try:
        result = await service.delete_reported_content(current_user.id, report_id)
    except ForumError as exc:
        raise http_error(exc) from exc
    return ReportedContentDeletionResponse(
        report=ReportResponse.model_validate(result.report),
        deleted_content=result.content_type,
        deleted_comments=result.deleted_comments,
    )
