"""Pydantic schemas for Events."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class EventCreate(BaseModel):
    calendar_id: str
    name: str
    start_time_utc: datetime
    end_time_utc: datetime
    description: Optional[str] = None
    location: Optional[str] = None
    is_public: bool = True
    requires_approval: bool = False
    has_capacity_limit: bool = False
    capacity: Optional[int] = None
    waiting_list: bool = False


class EventOut(BaseModel):
    event_id: str
    calendar_id: str
    created_by_id: str
    name: str
    description: Optional[str] = None
    start_time_utc: datetime
    end_time_utc: datetime
    location: Optional[str] = None
    is_public: bool
    requires_approval: bool
    has_capacity_limit: bool
    capacity: Optional[int] = None
    waiting_list: bool
    created_at: datetime

    model_config = {"from_attributes": True}
