"""Invitations to events: the collaborator flow that seeds `invited` roster entries."""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from registrar.errors import access_denied, already_exists, invalid_input, invalid_state, not_found
from registrar.models.attendee import AttendeeType
from registrar.models.invitation import EventInvitation, InvitationStatus
from registrar.models.user import User
from registrar.services import roster_service
from registrar.services.access_policy import ensure_organizer
from registrar.services.directory import get_invitation, require_actor
from registrar.services.locking import event_guard
from registrar.services.rate_limiter import rate_limiter
from registrar.services.transactions import storage_retry

logger = logging.getLogger(__name__)


def send_invitation(db: Session, event_id: str, actor_id: Optional[str], invited_user_id: str) -> EventInvitation:
    actor_id = require_actor(actor_id)
    rate_limiter.enforce(actor_id, "sendInvitation")
    return _create_invitation(db, str(event_id), actor_id, str(invited_user_id))


@storage_retry
def _create_invitation(db: Session, event_id: str, actor_id: str, invited_user_id: str) -> EventInvitation:
    with event_guard(db, event_id) as event:
        ensure_organizer(db, event, actor_id, "invite people to this event")
        if not db.query(User).filter(User.user_id == invited_user_id).first():
            raise not_found("User not found")
        if invited_user_id == actor_id:
            raise invalid_input("You cannot invite yourself")
        if get_invitation(db, event_id, invited_user_id) is not None:
            raise already_exists("User has already been invited to this event")
        if roster_service.get_attendee(db, event_id, invited_user_id) is not None:
            raise already_exists("User is already attending this event")

        invitation = EventInvitation(
            event_id=event_id,
            invited_user_id=invited_user_id,
            invited_by_id=actor_id,
            status=InvitationStatus.pending,
        )
        db.add(invitation)
        db.commit()
        db.refresh(invitation)

    logger.info("Invitation %s: %s invited %s to event %s", invitation.invitation_id, actor_id, invited_user_id, event_id)
    return invitation


def respond_to_invitation(
    db: Session,
    invitation_id: str,
    actor_id: Optional[str],
    status: InvitationStatus,
) -> EventInvitation:
    """Accept or decline one's own pending invitation. Accepting joins the roster as `invited`."""
    actor_id = require_actor(actor_id)
    try:
        status = InvitationStatus(status)
    except ValueError:
        raise invalid_input(f"Invalid invitation response: {status}")
    if status == InvitationStatus.pending:
        raise invalid_input("An invitation can only be accepted or declined")
    return _record_response(db, str(invitation_id), actor_id, status)


@storage_retry
def _record_response(db: Session, invitation_id: str, actor_id: str, status: InvitationStatus) -> EventInvitation:
    invitation = db.query(EventInvitation).filter(EventInvitation.invitation_id == invitation_id).first()
    if invitation is None:
        raise not_found("Invitation not found")
    if invitation.invited_user_id != actor_id:
        raise access_denied("You can only respond to your own invitations")

    with event_guard(db, invitation.event_id):
        db.refresh(invitation)
        if invitation.status != InvitationStatus.pending:
            raise invalid_state("Invitation has already been responded to")

        invitation.status = status
        invitation.responded_at = datetime.now(timezone.utc)
        if status == InvitationStatus.accepted:
            roster_service.sync_attendee(
                db, invitation.event_id, actor_id, present=True, attendee_type=AttendeeType.invited
            )
        db.commit()
        db.refresh(invitation)

    logger.info("Invitation %s %s by %s", invitation_id, status.value, actor_id)
    return invitation
