"""Pydantic schemas for event invitations."""
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel


class InvitationCreate(BaseModel):
    event_id: str
    invited_user_id: str


class InvitationResponse(BaseModel):
    status: Literal["accepted", "declined"]


class InvitationOut(BaseModel):
    invitation_id: str
    event_id: str
    invited_user_id: str
    invited_by_id: str
    status: str
    created_at: datetime
    responded_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
