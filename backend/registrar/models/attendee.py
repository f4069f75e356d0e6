"""EventAttendee ORM model: the derived roster of confirmed participants."""
import enum
from sqlalchemy import Column, Boolean, DateTime, ForeignKey, String, Enum as SAEnum
from registrar.database import Base


class AttendeeType(str, enum.Enum):
    creator = "creator"
    invited = "invited"
    registered = "registered"


class EventAttendee(Base):
    __tablename__ = "event_attendees"

    event_id = Column(String(36), ForeignKey("events.event_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True, index=True)
    attendee_type = Column(SAEnum(AttendeeType), nullable=False, default=AttendeeType.registered)
    checked_in = Column(Boolean, nullable=False, default=False)
    checked_in_at = Column(DateTime(timezone=True), nullable=True)
    registered_at = Column(DateTime(timezone=True), nullable=False)
