"""Pydantic schemas for Users."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserCreate(BaseModel):
    name: str
    username: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None


class UserOut(BaseModel):
    user_id: str
    name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserProfile(BaseModel):
    """Public subset of a user joined onto roster and request listings."""
    user_id: str
    name: Optional[str] = None
    username: Optional[str] = None
    image: Optional[str] = None
