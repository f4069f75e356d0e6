"""RSVP API routes: delegates to registration_service for access, approval and capacity checks."""
import logging
from typing import Literal, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from registrar.database import get_db
from registrar.models.rsvp import RSVPStatus
from registrar.schemas.rsvp import (
    GoingAttendeeOut, RSVPOut, RSVPPayload, RSVPSummaryOut, RSVPWithUserOut, RSVPWriteOut,
)
from registrar.services import registration_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{event_id}", response_model=RSVPWriteOut)
def upsert_rsvp(
    event_id: str,
    payload: RSVPPayload,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Set or update the acting user's RSVP. Over-capacity `going` may come back waitlisted."""
    result = registration_service.upsert_rsvp(
        db,
        event_id,
        actor_user_id,
        RSVPStatus(payload.status),
        guest_count=payload.guest_count,
        notes=payload.notes,
        dietary_restrictions=payload.dietary_restrictions,
    )
    return {"rsvp": result.rsvp, "waitlisted": result.waitlisted, "occupancy": result.occupancy}


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_rsvp(event_id: str, actor_user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """Cancel the acting user's registration."""
    registration_service.remove_rsvp(db, event_id, actor_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}", response_model=Optional[RSVPOut])
def get_my_rsvp(event_id: str, actor_user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return registration_service.get_user_rsvp(db, event_id, actor_user_id)


@router.get("/{event_id}/summary", response_model=RSVPSummaryOut)
def get_rsvp_summary(event_id: str, db: Session = Depends(get_db)):
    return registration_service.get_rsvp_summary(db, event_id)


@router.get("/{event_id}/all", response_model=list[RSVPWithUserOut])
def list_event_rsvps(
    event_id: str,
    status_filter: Optional[Literal["going", "maybe", "not_going", "waitlisted"]] = None,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """All RSVPs for an event (organizers only)."""
    return registration_service.list_event_rsvps(
        db, event_id, actor_user_id, RSVPStatus(status_filter) if status_filter else None
    )


@router.get("/{event_id}/going", response_model=list[GoingAttendeeOut])
def list_going(event_id: str, db: Session = Depends(get_db)):
    """Public list of who is going."""
    return registration_service.list_going(db, event_id)
