"""Event creation: the collaborator flow that seeds the creator's roster entry.

Validation follows the event form: non-empty name up to 200 characters,
description up to 1000, start before end, a positive capacity when limited,
and events may only be created in calendars the actor owns.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from registrar.errors import access_denied, invalid_input, not_found
from registrar.models.attendee import AttendeeType
from registrar.models.calendar import Calendar
from registrar.models.event import Event
from registrar.services import roster_service
from registrar.services.directory import require_actor
from registrar.services.rate_limiter import rate_limiter

logger = logging.getLogger(__name__)


def create_event(
    db: Session,
    actor_id: Optional[str],
    calendar_id: str,
    name: str,
    start_utc: datetime,
    end_utc: datetime,
    description: Optional[str] = None,
    location: Optional[str] = None,
    is_public: bool = True,
    requires_approval: bool = False,
    has_capacity_limit: bool = False,
    capacity: Optional[int] = None,
    waiting_list: bool = False,
) -> Event:
    """Create an event and register its creator on the roster."""
    actor_id = require_actor(actor_id)
    rate_limiter.enforce(actor_id, "createEvent")

    name = (name or "").strip()
    if not name:
        raise invalid_input("Event name is required")
    if len(name) > 200:
        raise invalid_input("Event name must be less than 200 characters")
    if description and len(description) > 1000:
        raise invalid_input("Description must be less than 1000 characters")
    if start_utc >= end_utc:
        raise invalid_input("End time must be after start time")
    if has_capacity_limit and (capacity is None or capacity < 1):
        raise invalid_input("Capacity must be at least 1 when the event has a capacity limit")

    calendar = db.query(Calendar).filter(Calendar.calendar_id == str(calendar_id)).first()
    if not calendar:
        raise not_found("Calendar not found")
    if calendar.owner_id != actor_id:
        raise access_denied("You can only create events in your own calendars")

    event = Event(
        calendar_id=calendar.calendar_id,
        created_by_id=actor_id,
        name=name,
        description=description.strip() if description else None,
        start_time_utc=start_utc,
        end_time_utc=end_utc,
        location=location.strip() if location else None,
        is_public=is_public,
        requires_approval=requires_approval,
        has_capacity_limit=has_capacity_limit,
        capacity=capacity if has_capacity_limit else None,
        waiting_list=waiting_list,
    )
    db.add(event)
    db.flush()

    roster_service.sync_attendee(db, event.event_id, actor_id, present=True, attendee_type=AttendeeType.creator)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) by %s", name, event.event_id, actor_id)
    return event
