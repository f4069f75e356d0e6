"""Calendar API routes (collaborator)."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from registrar.database import get_db
from registrar.models.calendar import Calendar
from registrar.models.user import User
from registrar.schemas.calendar import CalendarCreate, CalendarOut
from registrar.services.directory import require_actor
from registrar.services.rate_limiter import rate_limiter

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=CalendarOut, status_code=status.HTTP_201_CREATED)
def create_calendar(
    payload: CalendarCreate,
    actor_user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Create a calendar owned by the acting user."""
    owner_id = require_actor(actor_user_id)
    rate_limiter.enforce(owner_id, "createCalendar")
    if not db.query(User).filter(User.user_id == owner_id).first():
        raise HTTPException(status_code=404, detail="Owner user not found")

    calendar = Calendar(name=payload.name.strip(), color=payload.color, owner_id=owner_id)
    db.add(calendar)
    db.commit()
    db.refresh(calendar)
    logger.info("Created calendar '%s' (%s) for %s", calendar.name, calendar.calendar_id, owner_id)
    return calendar


@router.get("/{calendar_id}", response_model=CalendarOut)
def get_calendar(calendar_id: str, db: Session = Depends(get_db)):
    calendar = db.query(Calendar).filter(Calendar.calendar_id == calendar_id).first()
    if not calendar:
        raise HTTPException(status_code=404, detail="Calendar not found")
    return calendar
