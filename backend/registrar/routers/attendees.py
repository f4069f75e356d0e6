"""Attendee roster API routes."""
import logging
from typing import Literal, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from registrar.database import get_db
from registrar.models.attendee import AttendeeType
from registrar.schemas.attendee import (
    AttendanceHistoryOut, AttendeeCountsOut, AttendeeOut, AttendeeUserPayload, RosterEntryOut,
)
from registrar.services import roster_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/history", response_model=list[AttendanceHistoryOut])
def get_attendance_history(actor_user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """The acting user's attendance across events."""
    return roster_service.get_attendance_history(db, actor_user_id)


@router.get("/{event_id}", response_model=list[RosterEntryOut])
def list_attendees(
    event_id: str,
    attendee_type: Optional[Literal["creator", "invited", "registered"]] = None,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return roster_service.list_attendees(
        db, event_id, actor_user_id, AttendeeType(attendee_type) if attendee_type else None
    )


@router.get("/{event_id}/counts", response_model=AttendeeCountsOut)
def get_attendee_counts(event_id: str, db: Session = Depends(get_db)):
    return roster_service.get_attendee_counts(db, event_id)


@router.post("/{event_id}/check-in", response_model=AttendeeOut)
def check_in(
    event_id: str,
    payload: AttendeeUserPayload,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return roster_service.check_in_attendee(db, event_id, actor_user_id, payload.user_id)


@router.post("/{event_id}/check-out", response_model=AttendeeOut)
def check_out(
    event_id: str,
    payload: AttendeeUserPayload,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return roster_service.check_out_attendee(db, event_id, actor_user_id, payload.user_id)


@router.delete("/{event_id}/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_attendee(
    event_id: str,
    user_id: str,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Remove a participant (organizers only; never the creator)."""
    roster_service.remove_attendee(db, event_id, actor_user_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
