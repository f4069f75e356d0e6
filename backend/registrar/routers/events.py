"""Event API routes: creation delegates to event_service so the creator lands on the roster."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from registrar.database import get_db
from registrar.schemas.event import EventCreate, EventOut
from registrar.services import event_service
from registrar.services.directory import get_event as lookup_event

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Create a new event in one of the actor's calendars."""
    return event_service.create_event(
        db=db,
        actor_id=actor_user_id,
        calendar_id=payload.calendar_id,
        name=payload.name,
        start_utc=payload.start_time_utc,
        end_utc=payload.end_time_utc,
        description=payload.description,
        location=payload.location,
        is_public=payload.is_public,
        requires_approval=payload.requires_approval,
        has_capacity_limit=payload.has_capacity_limit,
        capacity=payload.capacity,
        waiting_list=payload.waiting_list,
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    """Fetch a single event by ID."""
    return lookup_event(db, event_id)
