"""Read-only lookups against collaborator data: events, calendars, invitations, profiles."""
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from registrar.errors import not_found, unauthorized
from registrar.models.calendar import Calendar
from registrar.models.event import Event
from registrar.models.invitation import EventInvitation, InvitationStatus
from registrar.models.user import User


def require_actor(actor_id: Optional[str]) -> str:
    """Return the acting user id, or raise ``Unauthorized`` when there is none."""
    if not actor_id:
        raise unauthorized()
    return str(actor_id)


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == str(event_id)).first()
    if not event:
        raise not_found("Event not found")
    return event


def get_calendar_owner_id(db: Session, event: Event) -> Optional[str]:
    calendar = db.query(Calendar).filter(Calendar.calendar_id == event.calendar_id).first()
    return calendar.owner_id if calendar else None


def get_invitation(db: Session, event_id: str, user_id: str) -> Optional[EventInvitation]:
    return (
        db.query(EventInvitation)
        .filter(EventInvitation.event_id == str(event_id), EventInvitation.invited_user_id == str(user_id))
        .first()
    )


def get_invitation_status(db: Session, event_id: str, user_id: str) -> Optional[InvitationStatus]:
    invitation = get_invitation(db, event_id, user_id)
    return invitation.status if invitation else None


def _public_profile(user: User) -> dict:
    return {
        "user_id": user.user_id,
        "name": user.name,
        "username": user.username,
        "image": user.image,
    }


def get_user_profile(db: Session, user_id: str) -> Optional[dict]:
    user = db.query(User).filter(User.user_id == str(user_id)).first()
    return _public_profile(user) if user else None


def get_user_profiles(db: Session, user_ids: Iterable[str]) -> dict[str, dict]:
    """Batch profile lookup keyed by user id; unknown ids are simply absent."""
    ids = {str(uid) for uid in user_ids}
    if not ids:
        return {}
    users = db.query(User).filter(User.user_id.in_(ids)).all()
    return {u.user_id: _public_profile(u) for u in users}
