"""Approval workflow for events that gate `going` behind an organizer review.

One request slot per (event, user):

    (none) --request--> pending --approve--> approved
                         ^   |
                         |   +--reject--> rejected
                         +----request-------+

Approval writes the RSVP and roster entry in the same unit of work as the
status change. Capacity is re-checked at review time because seats may have
filled since the request was made.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from registrar.errors import access_denied, already_exists, invalid_input, invalid_state, not_found
from registrar.models.approval_request import ApprovalRequest, ApprovalStatus, ReviewAction
from registrar.models.rsvp import EventRSVP, RSVPStatus
from registrar.services.access_policy import ensure_organizer, get_approval_request, has_event_access, is_organizer
from registrar.services.capacity import require_admission
from registrar.services.directory import get_event, get_user_profile, get_user_profiles, require_actor
from registrar.services.locking import event_guard
from registrar.services.rate_limiter import rate_limiter
from registrar.services.registration_service import get_rsvp, write_rsvp
from registrar.services.sanitize import sanitize_text, validate_guest_count
from registrar.services.transactions import storage_retry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewResult:
    request: ApprovalRequest
    rsvp: Optional[EventRSVP] = None

    @property
    def waitlisted(self) -> bool:
        return self.rsvp is not None and self.rsvp.status == RSVPStatus.waitlisted


def request_approval(
    db: Session,
    event_id: str,
    actor_id: Optional[str],
    message: Optional[str] = None,
    guest_count: Optional[int] = None,
) -> ApprovalRequest:
    """Ask the organizers to let the actor attend. A rejected request may be resubmitted."""
    actor_id = require_actor(actor_id)
    guest_count = validate_guest_count(guest_count)
    message = sanitize_text(message, "Message")

    rate_limiter.enforce(actor_id, "sendInvitation", str(event_id))
    return _submit_request(db, str(event_id), actor_id, message, guest_count)


@storage_retry
def _submit_request(db: Session, event_id: str, actor_id: str, message: Optional[str], guest_count: int) -> ApprovalRequest:
    with event_guard(db, event_id) as event:
        if not event.requires_approval:
            raise invalid_state("This event does not require approval")
        if is_organizer(db, event, actor_id):
            raise invalid_state("Organizers do not need approval for their own event")
        if not has_event_access(db, event, actor_id):
            raise access_denied("You don't have access to this event")

        existing = get_approval_request(db, event_id, actor_id)
        if existing is not None:
            if existing.status == ApprovalStatus.pending:
                raise already_exists("You already have a pending approval request for this event")
            if existing.status == ApprovalStatus.approved:
                raise already_exists("You are already approved for this event")

        require_admission(
            db, event, guest_count, excluding_user_id=actor_id,
            message="Event is at capacity and does not have a waiting list",
        )

        now = datetime.now(timezone.utc)
        if existing is not None:
            # Single-slot history: a rejected request is overwritten, not appended to.
            request = existing
            request.status = ApprovalStatus.pending
            request.reviewed_at = None
            request.reviewed_by = None
            request.review_notes = None
        else:
            request = ApprovalRequest(event_id=event_id, user_id=actor_id)
            db.add(request)
        request.message = message
        request.guest_count = guest_count
        request.requested_at = now

        db.commit()
        db.refresh(request)

    logger.info("Approval request %s submitted by %s for event %s", request.request_id, actor_id, event_id)
    return request


def review_approval(
    db: Session,
    request_id: str,
    actor_id: Optional[str],
    action: ReviewAction,
    notes: Optional[str] = None,
) -> ReviewResult:
    """Approve or reject a pending request (event creator or calendar owner only)."""
    actor_id = require_actor(actor_id)
    try:
        action = ReviewAction(action)
    except ValueError:
        raise invalid_input(f"Invalid review action: {action}")
    notes = sanitize_text(notes, "Review notes")

    rate_limiter.enforce(actor_id, "reviewApproval")
    return _apply_review(db, str(request_id), actor_id, action, notes)


@storage_retry
def _apply_review(db: Session, request_id: str, actor_id: str, action: ReviewAction, notes: Optional[str]) -> ReviewResult:
    request = db.query(ApprovalRequest).filter(ApprovalRequest.request_id == request_id).first()
    if request is None:
        raise not_found("Approval request not found")
    event_id = request.event_id

    with event_guard(db, event_id) as event:
        # Re-read under the guard; another reviewer may have got here first.
        db.refresh(request)
        ensure_organizer(db, event, actor_id, "review this request")
        if request.status != ApprovalStatus.pending:
            raise invalid_state("This request has already been reviewed")

        rsvp = None
        if action == ReviewAction.approve:
            admission = require_admission(
                db, event, request.guest_count, excluding_user_id=request.user_id,
                message="Approving this request would exceed event capacity",
            )
            rsvp_status = RSVPStatus.going if admission.admit else RSVPStatus.waitlisted
            existing = get_rsvp(db, event_id, request.user_id)
            rsvp = write_rsvp(
                db, event, request.user_id, rsvp_status, request.guest_count,
                keep_details=existing is not None,
            )

        request.status = ApprovalStatus.approved if action == ReviewAction.approve else ApprovalStatus.rejected
        request.reviewed_at = datetime.now(timezone.utc)
        request.reviewed_by = actor_id
        request.review_notes = notes

        db.commit()
        db.refresh(request)
        if rsvp is not None:
            db.refresh(rsvp)

    logger.info("Approval request %s %s by %s", request_id, request.status.value, actor_id)
    return ReviewResult(request=request, rsvp=rsvp)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def get_approval_status(db: Session, event_id: str, actor_id: Optional[str]) -> Optional[dict[str, Any]]:
    """The actor's own request for an event, with the reviewer's name once reviewed."""
    actor_id = require_actor(actor_id)
    request = get_approval_request(db, event_id, actor_id)
    if request is None:
        return None

    reviewer = None
    if request.reviewed_by:
        profile = get_user_profile(db, request.reviewed_by)
        if profile:
            reviewer = {"name": profile["name"], "username": profile["username"]}
    return {**_request_dict(request), "reviewer": reviewer}


def list_pending_requests(db: Session, event_id: str, actor_id: Optional[str]) -> list[dict[str, Any]]:
    actor_id = require_actor(actor_id)
    event = get_event(db, event_id)
    ensure_organizer(db, event, actor_id, "view approval requests for this event")

    requests = (
        db.query(ApprovalRequest)
        .filter(ApprovalRequest.event_id == event.event_id, ApprovalRequest.status == ApprovalStatus.pending)
        .order_by(ApprovalRequest.requested_at.desc())
        .all()
    )
    profiles = get_user_profiles(db, [r.user_id for r in requests])
    return [{**_request_dict(r), "user": profiles.get(r.user_id)} for r in requests]


def get_approval_stats(db: Session, event_id: str, actor_id: Optional[str]) -> dict[str, int]:
    actor_id = require_actor(actor_id)
    event = get_event(db, event_id)
    ensure_organizer(db, event, actor_id, "view approval statistics for this event")

    requests = db.query(ApprovalRequest).filter(ApprovalRequest.event_id == event.event_id).all()
    stats = {status.value: 0 for status in ApprovalStatus}
    for request in requests:
        stats[request.status.value] += 1
    stats["total"] = len(requests)
    return stats


def _request_dict(request: ApprovalRequest) -> dict[str, Any]:
    return {
        "request_id": request.request_id,
        "event_id": request.event_id,
        "user_id": request.user_id,
        "status": request.status,
        "guest_count": request.guest_count,
        "message": request.message,
        "requested_at": request.requested_at,
        "reviewed_at": request.reviewed_at,
        "reviewed_by": request.reviewed_by,
        "review_notes": request.review_notes,
    }
