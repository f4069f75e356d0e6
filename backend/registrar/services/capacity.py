"""Occupancy accounting and admission decisions against an event's capacity ceiling.

Occupancy is one number shared by every call site (direct RSVP, approval
request, approval review):

    sum(1 + guest_count) over `going` RSVPs
  + sum(1 + guest_count) over `approved` requests that have no RSVP yet

with the candidate's own contribution left out of both terms, so a user
editing their own registration is never counted twice. Callers must hold the
event guard for the check and the following write to be atomic.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from registrar.errors import capacity_exceeded
from registrar.models.approval_request import ApprovalRequest, ApprovalStatus
from registrar.models.event import Event
from registrar.models.rsvp import EventRSVP, RSVPStatus


@dataclass(frozen=True)
class Admission:
    admit: bool
    would_overflow: bool
    occupancy: int
    requested: int
    capacity: Optional[int]


def compute_occupancy(db: Session, event_id: str, excluding_user_id: Optional[str] = None) -> int:
    event_id = str(event_id)

    going = db.query(func.coalesce(func.sum(1 + EventRSVP.guest_count), 0)).filter(
        EventRSVP.event_id == event_id,
        EventRSVP.status == RSVPStatus.going,
    )
    users_with_rsvp = select(EventRSVP.user_id).where(EventRSVP.event_id == event_id)
    reserved = db.query(func.coalesce(func.sum(1 + ApprovalRequest.guest_count), 0)).filter(
        ApprovalRequest.event_id == event_id,
        ApprovalRequest.status == ApprovalStatus.approved,
        ApprovalRequest.user_id.not_in(users_with_rsvp),
    )
    if excluding_user_id is not None:
        going = going.filter(EventRSVP.user_id != str(excluding_user_id))
        reserved = reserved.filter(ApprovalRequest.user_id != str(excluding_user_id))

    return int(going.scalar() or 0) + int(reserved.scalar() or 0)


def check_admission(
    db: Session,
    event: Event,
    candidate_guest_count: int,
    excluding_user_id: Optional[str] = None,
) -> Admission:
    """Would one more head (plus guests) fit? Never raises."""
    requested = 1 + candidate_guest_count
    occupancy = compute_occupancy(db, event.event_id, excluding_user_id)
    if not event.capacity_limited:
        return Admission(True, False, occupancy, requested, None)

    fits = occupancy + requested <= event.capacity
    return Admission(admit=fits, would_overflow=not fits, occupancy=occupancy, requested=requested,
                     capacity=event.capacity)


def require_admission(
    db: Session,
    event: Event,
    candidate_guest_count: int,
    excluding_user_id: Optional[str] = None,
    message: str = "Event is at capacity",
) -> Admission:
    """Like ``check_admission`` but raises ``CapacityExceeded`` when there is no waiting list.

    A returned admission with ``admit=False`` means the caller should waitlist.
    """
    admission = check_admission(db, event, candidate_guest_count, excluding_user_id)
    if not admission.admit and not event.waiting_list:
        raise capacity_exceeded(message, occupancy=admission.occupancy, capacity=admission.capacity)
    return admission


def spots_remaining(db: Session, event: Event) -> Optional[int]:
    if not event.capacity_limited:
        return None
    return max(0, event.capacity - compute_occupancy(db, event.event_id))
