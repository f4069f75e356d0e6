"""Pydantic schemas for Calendars."""
from datetime import datetime
from pydantic import BaseModel, Field


class CalendarCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    color: str = Field(default="#6366f1", pattern=r"^#[0-9a-fA-F]{6}$")


class CalendarOut(BaseModel):
    calendar_id: str
    name: str
    color: str
    owner_id: str
    created_at: datetime

    model_config = {"from_attributes": True}
