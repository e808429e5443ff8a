"""
Admin Scheduling API Routes.

Staff endpoints for managing scheduled emails and assignment publish
times. The acting staff member comes from the X-Actor-Id header.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from coursecast.api.deps import get_actor_id, get_scheduling_service
from coursecast.components.scheduling import SchedulingError, SchedulingService
from coursecast.domain.entities import Assignment, ScheduledEmail

router = APIRouter()
assignments_router = APIRouter()

# Error codes that describe a state conflict rather than bad input
_CONFLICT_CODES = frozenset({"claimed"})


# --- Request/Response Models ---


class CreateScheduledEmailRequest(BaseModel):
    """Request to queue a scheduled email."""

    subject: str
    message: str
    scheduled_at: datetime = Field(..., description="When to send, UTC")
    recipient_ids: list[UUID]
    create_notification: bool = False
    assignment_id: UUID | None = None


class UpdateScheduledEmailRequest(BaseModel):
    """Partial update; status=CANCELLED cancels the email instead."""

    status: Literal["CANCELLED"] | None = None
    subject: str | None = None
    message: str | None = None
    scheduled_at: datetime | None = None
    recipient_ids: list[UUID] | None = None
    create_notification: bool | None = None


class ScheduleAssignmentRequest(BaseModel):
    """Request to set an assignment's publish time."""

    publish_at: datetime = Field(..., description="Publish time, UTC")
    notify_on_publish: bool = False


class ScheduledEmailResponse(BaseModel):
    """Scheduled email response."""

    id: UUID
    status: str
    scheduled_at: datetime
    recipient_ids: list[UUID]
    subject: str
    message: str
    create_notification: bool
    assignment_id: UUID | None = None
    error: str | None = None
    sent_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_by: UUID
    created_by_name: str | None = None
    created_at: datetime


class AssignmentScheduleResponse(BaseModel):
    """Assignment schedule response."""

    id: UUID
    title: str
    published: bool
    scheduled_publish_at: datetime | None = None
    notify_on_publish: bool


# --- Helpers ---


def email_to_response(email: ScheduledEmail) -> ScheduledEmailResponse:
    return ScheduledEmailResponse(
        id=email.id,
        status=email.status,
        scheduled_at=email.scheduled_at,
        recipient_ids=email.recipient_ids,
        subject=email.subject,
        message=email.message,
        create_notification=email.create_notification,
        assignment_id=email.assignment_id,
        error=email.error,
        sent_at=email.sent_at,
        cancelled_at=email.cancelled_at,
        created_by=email.created_by,
        created_by_name=email.created_by_name,
        created_at=email.created_at,
    )


def assignment_to_response(assignment: Assignment) -> AssignmentScheduleResponse:
    return AssignmentScheduleResponse(
        id=assignment.id,
        title=assignment.title,
        published=assignment.published,
        scheduled_publish_at=assignment.scheduled_publish_at,
        notify_on_publish=assignment.notify_on_publish,
    )


def _serialize_errors(errors: list[SchedulingError]) -> list[dict[str, Any]]:
    return [
        {
            "code": e.code,
            "message": e.message,
            "field": e.field,
            "item_id": str(e.item_id) if e.item_id else None,
        }
        for e in errors
    ]


def _raise_for_errors(errors: list[SchedulingError]) -> None:
    codes = {e.code for e in errors}
    if "not_found" in codes:
        status_code = status.HTTP_404_NOT_FOUND
    elif codes & _CONFLICT_CODES:
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=status_code, detail={"errors": _serialize_errors(errors)})


# --- Scheduled email routes ---


@router.get("", response_model=list[ScheduledEmailResponse])
def list_scheduled_emails(
    actor_id: UUID = Depends(get_actor_id),
    service: SchedulingService = Depends(get_scheduling_service),
) -> Any:
    """List scheduled emails ordered by scheduled time."""
    return [email_to_response(e) for e in service.list_emails()]


@router.post("", response_model=ScheduledEmailResponse, status_code=status.HTTP_201_CREATED)
def create_scheduled_email(
    request: CreateScheduledEmailRequest,
    actor_id: UUID = Depends(get_actor_id),
    service: SchedulingService = Depends(get_scheduling_service),
) -> Any:
    """Queue a new scheduled email."""
    email, errors = service.schedule_email(
        subject=request.subject,
        message=request.message,
        scheduled_at=request.scheduled_at,
        recipient_ids=request.recipient_ids,
        actor_id=actor_id,
        create_notification=request.create_notification,
        assignment_id=request.assignment_id,
    )
    if errors:
        _raise_for_errors(errors)
    if email is None:
        raise HTTPException(status_code=500, detail="Failed to create scheduled email")
    return email_to_response(email)


@router.get("/{email_id}", response_model=ScheduledEmailResponse)
def get_scheduled_email(
    email_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    service: SchedulingService = Depends(get_scheduling_service),
) -> Any:
    """Get a single scheduled email."""
    email = service.get_email(email_id)
    if email is None:
        raise HTTPException(status_code=404, detail="Scheduled email not found")
    return email_to_response(email)


@router.patch("/{email_id}", response_model=ScheduledEmailResponse)
def update_scheduled_email(
    email_id: UUID,
    request: UpdateScheduledEmailRequest,
    actor_id: UUID = Depends(get_actor_id),
    service: SchedulingService = Depends(get_scheduling_service),
) -> Any:
    """Update or cancel a PENDING scheduled email."""
    if request.status == "CANCELLED":
        email, errors = service.cancel_email(email_id, actor_id)
    else:
        changes = {
            k: v
            for k, v in request.model_dump(exclude_unset=True, exclude={"status"}).items()
            if v is not None
        }
        email, errors = service.update_email(email_id, changes, actor_id)

    if errors:
        _raise_for_errors(errors)
    if email is None:
        raise HTTPException(status_code=404, detail="Scheduled email not found")
    return email_to_response(email)


@router.delete("/{email_id}")
def delete_scheduled_email(
    email_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    service: SchedulingService = Depends(get_scheduling_service),
) -> dict[str, Any]:
    """Delete a scheduled email in any status."""
    _, errors = service.delete_email(email_id, actor_id)
    if errors:
        _raise_for_errors(errors)
    return {"success": True}


# --- Assignment schedule routes ---


@assignments_router.post("/{assignment_id}/schedule", response_model=AssignmentScheduleResponse)
def schedule_assignment(
    assignment_id: UUID,
    request: ScheduleAssignmentRequest,
    actor_id: UUID = Depends(get_actor_id),
    service: SchedulingService = Depends(get_scheduling_service),
) -> Any:
    """Set the publish time of an unpublished assignment."""
    assignment, errors = service.schedule_assignment(
        assignment_id=assignment_id,
        publish_at=request.publish_at,
        notify_on_publish=request.notify_on_publish,
        actor_id=actor_id,
    )
    if errors:
        _raise_for_errors(errors)
    if assignment is None:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return assignment_to_response(assignment)
