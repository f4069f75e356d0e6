"""Attendee roster: the derived list of confirmed participants per event.

Sync calls never commit; they join the caller's unit of work so the roster
changes together with the RSVP, approval or invitation that drove them.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from registrar.errors import access_denied, already_exists, invalid_state, not_found
from registrar.models.approval_request import ApprovalStatus
from registrar.models.attendee import EventAttendee, AttendeeType
from registrar.models.calendar import Calendar
from registrar.models.event import Event
from registrar.models.invitation import EventInvitation, InvitationStatus
from registrar.models.rsvp import EventRSVP
from registrar.services.access_policy import ensure_organizer, get_approval_request, is_organizer
from registrar.services.directory import get_event, get_user_profiles, require_actor
from registrar.services.locking import event_guard
from registrar.services.rate_limiter import rate_limiter
from registrar.services.transactions import storage_retry

logger = logging.getLogger(__name__)


def get_attendee(db: Session, event_id: str, user_id: str) -> Optional[EventAttendee]:
    return (
        db.query(EventAttendee)
        .filter(EventAttendee.event_id == str(event_id), EventAttendee.user_id == str(user_id))
        .first()
    )


def sync_attendee(
    db: Session,
    event_id: str,
    user_id: str,
    present: bool,
    attendee_type: AttendeeType = AttendeeType.registered,
) -> Optional[EventAttendee]:
    """Make the roster reflect ``present`` for one user. Idempotent.

    An existing entry keeps its type; a ``creator`` entry is never removed.
    """
    attendee = get_attendee(db, event_id, user_id)
    if present:
        if attendee is None:
            attendee = EventAttendee(
                event_id=str(event_id),
                user_id=str(user_id),
                attendee_type=attendee_type,
                checked_in=False,
                registered_at=datetime.now(timezone.utc),
            )
            db.add(attendee)
            db.flush()
            logger.info("Roster: added %s as %s to event %s", user_id, attendee_type.value, event_id)
        return attendee

    if attendee is not None and attendee.attendee_type != AttendeeType.creator:
        db.delete(attendee)
        db.flush()
        logger.info("Roster: removed %s from event %s", user_id, event_id)
        return None
    return attendee


def attendee_type_for(event: Event, user_id: str) -> AttendeeType:
    return AttendeeType.creator if event.created_by_id == str(user_id) else AttendeeType.registered


# ---------------------------------------------------------------------------
# Queries (snapshot reads, no event guard)
# ---------------------------------------------------------------------------
def get_attendee_counts(db: Session, event_id: str) -> dict[str, int]:
    get_event(db, event_id)
    attendees = db.query(EventAttendee).filter(EventAttendee.event_id == str(event_id)).all()
    counts = {"total": len(attendees), "creators": 0, "invited": 0, "registered": 0, "checked_in": 0}
    for attendee in attendees:
        if attendee.attendee_type == AttendeeType.creator:
            counts["creators"] += 1
        elif attendee.attendee_type == AttendeeType.invited:
            counts["invited"] += 1
        elif attendee.attendee_type == AttendeeType.registered:
            counts["registered"] += 1
        if attendee.checked_in:
            counts["checked_in"] += 1
    return counts


def list_attendees(
    db: Session,
    event_id: str,
    actor_id: Optional[str],
    attendee_type: Optional[AttendeeType] = None,
) -> list[dict[str, Any]]:
    """Roster with profile and RSVP details, oldest registration first.

    For private events only organizers and people already on the roster may look.
    """
    actor_id = require_actor(actor_id)
    event = get_event(db, event_id)
    if not event.is_public and not is_organizer(db, event, actor_id):
        if get_attendee(db, event_id, actor_id) is None:
            raise access_denied("You don't have permission to view attendees for this event")

    query = db.query(EventAttendee).filter(EventAttendee.event_id == event.event_id)
    if attendee_type is not None:
        query = query.filter(EventAttendee.attendee_type == attendee_type)
    attendees = query.order_by(EventAttendee.registered_at).all()

    user_ids = [a.user_id for a in attendees]
    profiles = get_user_profiles(db, user_ids)
    rsvps = {
        r.user_id: r
        for r in db.query(EventRSVP).filter(EventRSVP.event_id == event.event_id, EventRSVP.user_id.in_(user_ids)).all()
    } if user_ids else {}

    result = []
    for attendee in attendees:
        rsvp = rsvps.get(attendee.user_id)
        result.append({
            "user_id": attendee.user_id,
            "attendee_type": attendee.attendee_type,
            "checked_in": attendee.checked_in,
            "checked_in_at": attendee.checked_in_at,
            "registered_at": attendee.registered_at,
            "user": profiles.get(attendee.user_id),
            "rsvp": {
                "status": rsvp.status,
                "guest_count": rsvp.guest_count,
                "dietary_restrictions": rsvp.dietary_restrictions,
                "notes": rsvp.notes,
            } if rsvp else None,
        })
    return result


def get_attendance_history(db: Session, actor_id: Optional[str]) -> list[dict[str, Any]]:
    """The actor's own roster entries with event and calendar summaries, newest first."""
    actor_id = require_actor(actor_id)
    rows = (
        db.query(EventAttendee, Event, Calendar)
        .join(Event, Event.event_id == EventAttendee.event_id)
        .outerjoin(Calendar, Calendar.calendar_id == Event.calendar_id)
        .filter(EventAttendee.user_id == actor_id)
        .order_by(EventAttendee.registered_at.desc())
        .all()
    )
    return [
        {
            "event_id": attendee.event_id,
            "attendee_type": attendee.attendee_type,
            "checked_in": attendee.checked_in,
            "registered_at": attendee.registered_at,
            "event": {
                "event_id": event.event_id,
                "name": event.name,
                "start_time_utc": event.start_time_utc,
                "end_time_utc": event.end_time_utc,
                "calendar": {
                    "calendar_id": calendar.calendar_id,
                    "name": calendar.name,
                    "color": calendar.color,
                } if calendar else None,
            },
        }
        for attendee, event, calendar in rows
    ]


# ---------------------------------------------------------------------------
# Organizer writes
# ---------------------------------------------------------------------------
def check_in_attendee(db: Session, event_id: str, actor_id: Optional[str], user_id: str) -> EventAttendee:
    actor_id = require_actor(actor_id)
    rate_limiter.enforce(actor_id, "manageAttendees", str(event_id))
    return _set_checked_in(db, str(event_id), actor_id, str(user_id), True)


def check_out_attendee(db: Session, event_id: str, actor_id: Optional[str], user_id: str) -> EventAttendee:
    actor_id = require_actor(actor_id)
    rate_limiter.enforce(actor_id, "manageAttendees", str(event_id))
    return _set_checked_in(db, str(event_id), actor_id, str(user_id), False)


@storage_retry
def _set_checked_in(db: Session, event_id: str, actor_id: str, user_id: str, checked_in: bool) -> EventAttendee:
    verb = "check in" if checked_in else "check out"
    with event_guard(db, event_id) as event:
        ensure_organizer(db, event, actor_id, f"{verb} attendees")

        attendee = get_attendee(db, event_id, user_id)
        if attendee is None:
            raise not_found("User is not an attendee of this event")
        if checked_in and attendee.checked_in:
            raise already_exists("User is already checked in")
        if not checked_in and not attendee.checked_in:
            raise invalid_state("User is not checked in")

        attendee.checked_in = checked_in
        attendee.checked_in_at = datetime.now(timezone.utc) if checked_in else None
        db.commit()
        db.refresh(attendee)

    logger.info("Organizer %s: %s user %s at event %s", actor_id, verb, user_id, event_id)
    return attendee


def remove_attendee(db: Session, event_id: str, actor_id: Optional[str], user_id: str) -> None:
    """Drop someone from the roster along with their RSVP; the creator cannot be removed."""
    actor_id = require_actor(actor_id)
    rate_limiter.enforce(actor_id, "manageAttendees", str(event_id))
    _remove_attendee(db, str(event_id), actor_id, str(user_id))


@storage_retry
def _remove_attendee(db: Session, event_id: str, actor_id: str, user_id: str) -> None:
    with event_guard(db, event_id) as event:
        ensure_organizer(db, event, actor_id, "remove attendees")

        attendee = get_attendee(db, event_id, user_id)
        if attendee is None:
            raise not_found("User is not an attendee of this event")
        if attendee.attendee_type == AttendeeType.creator:
            raise invalid_state("Cannot remove the event creator")

        db.delete(attendee)

        rsvp = (
            db.query(EventRSVP)
            .filter(EventRSVP.event_id == event_id, EventRSVP.user_id == user_id)
            .first()
        )
        if rsvp is not None:
            db.delete(rsvp)

        invitation = (
            db.query(EventInvitation)
            .filter(EventInvitation.event_id == event_id, EventInvitation.invited_user_id == user_id)
            .first()
        )
        if invitation is not None and invitation.status == InvitationStatus.accepted:
            invitation.status = InvitationStatus.declined
            invitation.responded_at = datetime.now(timezone.utc)

        # Approved requests without an RSVP still count toward occupancy.
        approval = get_approval_request(db, event_id, user_id)
        if approval is not None and approval.status == ApprovalStatus.approved:
            approval.status = ApprovalStatus.rejected
            approval.reviewed_at = datetime.now(timezone.utc)
            approval.reviewed_by = actor_id
            approval.review_notes = "Removed from event by organizer"

        db.commit()

    logger.info("Organizer %s removed attendee %s from event %s", actor_id, user_id, event_id)
