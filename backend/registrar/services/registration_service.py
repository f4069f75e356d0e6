"""RSVP registration store: the authoritative per-(event, user) record.

Write path: rate limit -> event guard -> access policy -> capacity admission
-> RSVP write -> roster sync, committed as one unit under the event guard.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from registrar.errors import invalid_input, not_found
from registrar.models.event import Event
from registrar.models.rsvp import EventRSVP, RSVPStatus
from registrar.services import roster_service
from registrar.services.access_policy import can_write_registration, ensure_organizer
from registrar.services.capacity import compute_occupancy, require_admission, spots_remaining
from registrar.services.directory import get_event, get_user_profiles, require_actor
from registrar.services.locking import event_guard
from registrar.services.rate_limiter import rate_limiter
from registrar.services.sanitize import sanitize_text, validate_guest_count
from registrar.services.transactions import storage_retry

logger = logging.getLogger(__name__)

SUBMITTABLE_STATUSES = (RSVPStatus.going, RSVPStatus.maybe, RSVPStatus.not_going)


@dataclass(frozen=True)
class RSVPResult:
    rsvp: EventRSVP
    waitlisted: bool
    occupancy: int


def get_rsvp(db: Session, event_id: str, user_id: str) -> Optional[EventRSVP]:
    return (
        db.query(EventRSVP)
        .filter(EventRSVP.event_id == str(event_id), EventRSVP.user_id == str(user_id))
        .first()
    )


def write_rsvp(
    db: Session,
    event: Event,
    user_id: str,
    status: RSVPStatus,
    guest_count: int,
    notes: Optional[str] = None,
    dietary_restrictions: Optional[str] = None,
    keep_details: bool = False,
) -> EventRSVP:
    """Create or overwrite the RSVP and bring the roster in line. Caller holds the guard and commits."""
    rsvp = get_rsvp(db, event.event_id, user_id)
    now = datetime.now(timezone.utc)
    if rsvp is None:
        rsvp = EventRSVP(event_id=event.event_id, user_id=str(user_id))
        db.add(rsvp)
    rsvp.status = status
    rsvp.guest_count = guest_count
    if not keep_details:
        rsvp.notes = notes
        rsvp.dietary_restrictions = dietary_restrictions
    rsvp.rsvp_at = now
    db.flush()

    roster_service.sync_attendee(
        db,
        event.event_id,
        user_id,
        present=status == RSVPStatus.going,
        attendee_type=roster_service.attendee_type_for(event, user_id),
    )
    return rsvp


def upsert_rsvp(
    db: Session,
    event_id: str,
    actor_id: Optional[str],
    status: RSVPStatus,
    guest_count: Optional[int] = None,
    notes: Optional[str] = None,
    dietary_restrictions: Optional[str] = None,
) -> RSVPResult:
    """Record the actor's RSVP. A ``going`` that does not fit is waitlisted or refused."""
    actor_id = require_actor(actor_id)
    try:
        status = RSVPStatus(status)
    except ValueError:
        raise invalid_input(f"Invalid RSVP status: {status}")
    if status not in SUBMITTABLE_STATUSES:
        raise invalid_input(f"Invalid RSVP status: {status.value}")
    guest_count = validate_guest_count(guest_count)
    notes = sanitize_text(notes, "Notes")
    dietary_restrictions = sanitize_text(dietary_restrictions, "Dietary restrictions")

    rate_limiter.enforce(actor_id, "updateRSVP", str(event_id))
    return _apply_rsvp(db, str(event_id), actor_id, status, guest_count, notes, dietary_restrictions)


@storage_retry
def _apply_rsvp(
    db: Session,
    event_id: str,
    actor_id: str,
    status: RSVPStatus,
    guest_count: int,
    notes: Optional[str],
    dietary_restrictions: Optional[str],
) -> RSVPResult:
    with event_guard(db, event_id) as event:
        can_write_registration(db, event, actor_id, status).raise_if_denied()

        stored_status = status
        if status == RSVPStatus.going:
            admission = require_admission(db, event, guest_count, excluding_user_id=actor_id)
            if not admission.admit:
                stored_status = RSVPStatus.waitlisted

        rsvp = write_rsvp(db, event, actor_id, stored_status, guest_count, notes, dietary_restrictions)
        db.commit()
        db.refresh(rsvp)
        occupancy = compute_occupancy(db, event_id)

    logger.info(
        "User %s RSVP'd '%s' (+%d guests) to event %s, occupancy now %d",
        actor_id, stored_status.value, guest_count, event_id, occupancy,
    )
    return RSVPResult(rsvp=rsvp, waitlisted=stored_status == RSVPStatus.waitlisted, occupancy=occupancy)


def remove_rsvp(db: Session, event_id: str, actor_id: Optional[str]) -> None:
    """Hard-delete the actor's RSVP (cancellation)."""
    actor_id = require_actor(actor_id)
    rate_limiter.enforce(actor_id, "updateRSVP", str(event_id))
    _delete_rsvp(db, str(event_id), actor_id)


@storage_retry
def _delete_rsvp(db: Session, event_id: str, actor_id: str) -> None:
    with event_guard(db, event_id):
        rsvp = get_rsvp(db, event_id, actor_id)
        if rsvp is None:
            raise not_found("No RSVP found to remove")
        db.delete(rsvp)
        roster_service.sync_attendee(db, event_id, actor_id, present=False)
        db.commit()
    logger.info("User %s removed their RSVP to event %s", actor_id, event_id)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def get_user_rsvp(db: Session, event_id: str, actor_id: Optional[str]) -> Optional[EventRSVP]:
    actor_id = require_actor(actor_id)
    return get_rsvp(db, event_id, actor_id)


def get_rsvp_summary(db: Session, event_id: str) -> dict[str, Any]:
    event = get_event(db, event_id)
    summary: dict[str, Any] = {status.value: 0 for status in RSVPStatus}
    summary["total_guests"] = 0
    for rsvp in db.query(EventRSVP).filter(EventRSVP.event_id == event.event_id).all():
        summary[rsvp.status.value] += 1
        if rsvp.status == RSVPStatus.going:
            summary["total_guests"] += rsvp.head_count

    summary["capacity"] = event.capacity if event.capacity_limited else None
    summary["spots_remaining"] = spots_remaining(db, event)
    return summary


def list_event_rsvps(
    db: Session,
    event_id: str,
    actor_id: Optional[str],
    status: Optional[RSVPStatus] = None,
) -> list[dict[str, Any]]:
    """All RSVPs for organizers, newest first, with the responder's profile."""
    actor_id = require_actor(actor_id)
    event = get_event(db, event_id)
    ensure_organizer(db, event, actor_id, "view RSVPs for this event")

    query = db.query(EventRSVP).filter(EventRSVP.event_id == event.event_id)
    if status is not None:
        query = query.filter(EventRSVP.status == status)
    rsvps = query.order_by(EventRSVP.rsvp_at.desc()).all()

    profiles = get_user_profiles(db, [r.user_id for r in rsvps])
    return [_rsvp_dict(r, profiles.get(r.user_id)) for r in rsvps]


def list_going(db: Session, event_id: str) -> list[dict[str, Any]]:
    """Public list of confirmed attendees in RSVP order."""
    event = get_event(db, event_id)
    rsvps = (
        db.query(EventRSVP)
        .filter(EventRSVP.event_id == event.event_id, EventRSVP.status == RSVPStatus.going)
        .order_by(EventRSVP.rsvp_at)
        .all()
    )
    profiles = get_user_profiles(db, [r.user_id for r in rsvps])
    return [
        {"user_id": r.user_id, "rsvp_at": r.rsvp_at, "user": profiles[r.user_id]}
        for r in rsvps
        if r.user_id in profiles
    ]


def _rsvp_dict(rsvp: EventRSVP, profile: Optional[dict]) -> dict[str, Any]:
    return {
        "rsvp_id": rsvp.rsvp_id,
        "event_id": rsvp.event_id,
        "user_id": rsvp.user_id,
        "status": rsvp.status,
        "guest_count": rsvp.guest_count,
        "dietary_restrictions": rsvp.dietary_restrictions,
        "notes": rsvp.notes,
        "rsvp_at": rsvp.rsvp_at,
        "user": profile,
    }
