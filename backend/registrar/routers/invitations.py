"""Invitation API routes (collaborator): acceptance feeds the attendee roster."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from registrar.database import get_db
from registrar.schemas.invitation import InvitationCreate, InvitationOut, InvitationResponse
from registrar.services import invitation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=InvitationOut, status_code=status.HTTP_201_CREATED)
def send_invitation(
    payload: InvitationCreate,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Invite a user to an event (organizers only)."""
    return invitation_service.send_invitation(db, payload.event_id, actor_user_id, payload.invited_user_id)


@router.post("/{invitation_id}/respond", response_model=InvitationOut)
def respond_to_invitation(
    invitation_id: str,
    payload: InvitationResponse,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Accept or decline an invitation addressed to the acting user."""
    return invitation_service.respond_to_invitation(db, invitation_id, actor_user_id, payload.status)
