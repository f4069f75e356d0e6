"""Pydantic schemas for approval requests."""
from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from registrar.schemas.rsvp import RSVPOut
from registrar.schemas.user import UserProfile


class ApprovalRequestCreate(BaseModel):
    event_id: str
    message: Optional[str] = None
    guest_count: int = Field(default=0, ge=0)


class ApprovalReview(BaseModel):
    action: Literal["approve", "reject"]
    review_notes: Optional[str] = None


class ApprovalRequestOut(BaseModel):
    request_id: str
    event_id: str
    user_id: str
    status: str
    guest_count: int
    message: Optional[str] = None
    requested_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    review_notes: Optional[str] = None

    model_config = {"from_attributes": True}


class ReviewerOut(BaseModel):
    name: Optional[str] = None
    username: Optional[str] = None


class ApprovalStatusOut(ApprovalRequestOut):
    reviewer: Optional[ReviewerOut] = None


class PendingRequestOut(ApprovalRequestOut):
    user: Optional[UserProfile] = None


class ReviewOut(BaseModel):
    request: ApprovalRequestOut
    rsvp: Optional[RSVPOut] = None
    waitlisted: bool = False


class ApprovalStatsOut(BaseModel):
    pending: int
    approved: int
    rejected: int
    total: int
