"""Pydantic schemas for RSVPs."""
from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from registrar.schemas.user import UserProfile


class RSVPPayload(BaseModel):
    status: Literal["going", "maybe", "not_going"]
    guest_count: int = Field(default=0, ge=0)
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None


class RSVPOut(BaseModel):
    rsvp_id: str
    event_id: str
    user_id: str
    status: str
    guest_count: int
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None
    rsvp_at: datetime

    model_config = {"from_attributes": True}


class RSVPWriteOut(BaseModel):
    rsvp: RSVPOut
    waitlisted: bool
    occupancy: int


class RSVPWithUserOut(RSVPOut):
    user: Optional[UserProfile] = None


class GoingAttendeeOut(BaseModel):
    user_id: str
    rsvp_at: datetime
    user: UserProfile


class RSVPSummaryOut(BaseModel):
    going: int
    maybe: int
    not_going: int
    waitlisted: int
    total_guests: int
    capacity: Optional[int] = None
    spots_remaining: Optional[int] = None
