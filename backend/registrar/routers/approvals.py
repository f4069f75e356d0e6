"""Approval request API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from registrar.database import get_db
from registrar.models.approval_request import ReviewAction
from registrar.schemas.approval import (
    ApprovalRequestCreate, ApprovalRequestOut, ApprovalReview, ApprovalStatsOut, ApprovalStatusOut,
    PendingRequestOut, ReviewOut,
)
from registrar.services import approval_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=ApprovalRequestOut, status_code=status.HTTP_201_CREATED)
def request_approval(
    payload: ApprovalRequestCreate,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Ask to attend an approval-gated event (or resubmit after a rejection)."""
    return approval_service.request_approval(
        db, payload.event_id, actor_user_id, message=payload.message, guest_count=payload.guest_count
    )


@router.post("/{request_id}/review", response_model=ReviewOut)
def review_approval(
    request_id: str,
    payload: ApprovalReview,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Approve or reject a pending request (event creator or calendar owner)."""
    result = approval_service.review_approval(
        db, request_id, actor_user_id, ReviewAction(payload.action), payload.review_notes
    )
    return {"request": result.request, "rsvp": result.rsvp, "waitlisted": result.waitlisted}


@router.get("/status", response_model=Optional[ApprovalStatusOut])
def get_approval_status(event_id: str, actor_user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return approval_service.get_approval_status(db, event_id, actor_user_id)


@router.get("/pending", response_model=list[PendingRequestOut])
def list_pending_requests(event_id: str, actor_user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return approval_service.list_pending_requests(db, event_id, actor_user_id)


@router.get("/stats", response_model=ApprovalStatsOut)
def get_approval_stats(event_id: str, actor_user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return approval_service.get_approval_stats(db, event_id, actor_user_id)
