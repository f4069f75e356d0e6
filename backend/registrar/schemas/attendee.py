"""Pydantic schemas for the attendee roster."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from registrar.schemas.user import UserProfile


class AttendeeUserPayload(BaseModel):
    user_id: str


class AttendeeOut(BaseModel):
    event_id: str
    user_id: str
    attendee_type: str
    checked_in: bool
    checked_in_at: Optional[datetime] = None
    registered_at: datetime

    model_config = {"from_attributes": True}


class AttendeeRSVPOut(BaseModel):
    status: str
    guest_count: int
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None


class RosterEntryOut(BaseModel):
    user_id: str
    attendee_type: str
    checked_in: bool
    checked_in_at: Optional[datetime] = None
    registered_at: datetime
    user: Optional[UserProfile] = None
    rsvp: Optional[AttendeeRSVPOut] = None


class AttendeeCountsOut(BaseModel):
    total: int
    creators: int
    invited: int
    registered: int
    checked_in: int


class CalendarSummary(BaseModel):
    calendar_id: str
    name: str
    color: str


class EventSummary(BaseModel):
    event_id: str
    name: str
    start_time_utc: datetime
    end_time_utc: datetime
    calendar: Optional[CalendarSummary] = None


class AttendanceHistoryOut(BaseModel):
    event_id: str
    attendee_type: str
    checked_in: bool
    registered_at: datetime
    event: EventSummary
