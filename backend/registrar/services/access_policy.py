"""Who may write a registration for an event. Pure reads, never mutates."""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from registrar.errors import ErrorKind, RegistrationError, access_denied
from registrar.models.approval_request import ApprovalRequest, ApprovalStatus
from registrar.models.event import Event
from registrar.models.invitation import InvitationStatus
from registrar.models.rsvp import RSVPStatus
from registrar.services.directory import get_calendar_owner_id, get_invitation_status


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    is_organizer: bool = False

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise RegistrationError(self.kind, self.message)


ALLOWED = AccessDecision(allowed=True)


def is_organizer(db: Session, event: Event, user_id: str) -> bool:
    """Event creator or owner of the event's calendar."""
    if event.created_by_id == str(user_id):
        return True
    return get_calendar_owner_id(db, event) == str(user_id)


def ensure_organizer(db: Session, event: Event, actor_id: str, action: str) -> None:
    if not is_organizer(db, event, actor_id):
        raise access_denied(f"You don't have permission to {action}")


def has_event_access(db: Session, event: Event, user_id: str) -> bool:
    """Public events are open; private ones need an accepted invitation."""
    if event.is_public:
        return True
    return get_invitation_status(db, event.event_id, user_id) == InvitationStatus.accepted


def get_approval_request(db: Session, event_id: str, user_id: str) -> Optional[ApprovalRequest]:
    return (
        db.query(ApprovalRequest)
        .filter(ApprovalRequest.event_id == str(event_id), ApprovalRequest.user_id == str(user_id))
        .first()
    )


def can_write_registration(db: Session, event: Event, actor_id: str, status: RSVPStatus) -> AccessDecision:
    """Evaluate, in order: organizer override, private-event access, approval gate."""
    if is_organizer(db, event, actor_id):
        return AccessDecision(allowed=True, is_organizer=True)

    if not has_event_access(db, event, actor_id):
        return AccessDecision(False, ErrorKind.access_denied, "You don't have access to RSVP for this event")

    if event.requires_approval and status == RSVPStatus.going:
        request = get_approval_request(db, event.event_id, actor_id)
        if request is None:
            return AccessDecision(
                False, ErrorKind.approval_required,
                "This event requires approval. Please request approval first.",
            )
        if request.status == ApprovalStatus.pending:
            return AccessDecision(False, ErrorKind.approval_pending, "Your approval request is pending review.")
        if request.status == ApprovalStatus.rejected:
            return AccessDecision(
                False, ErrorKind.approval_rejected,
                "Your approval request was rejected. You cannot RSVP to this event.",
            )

    return ALLOWED
