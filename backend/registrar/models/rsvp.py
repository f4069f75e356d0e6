"""EventRSVP ORM model: the authoritative per-(event, user) registration."""
import uuid
import enum
from sqlalchemy import (
    Column, String, Text, Integer, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint,
    Enum as SAEnum,
)
from registrar.database import Base


class RSVPStatus(str, enum.Enum):
    going = "going"
    maybe = "maybe"
    not_going = "not_going"
    # Assigned by the capacity allocator, never submitted by a caller
    waitlisted = "waitlisted"


class EventRSVP(Base):
    __tablename__ = "event_rsvps"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_rsvp_event_user"),
        Index("ix_rsvp_event_status", "event_id", "status"),
        CheckConstraint("guest_count >= 0", name="check_rsvp_guest_count_non_negative"),
    )

    rsvp_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    status = Column(SAEnum(RSVPStatus), nullable=False)
    guest_count = Column(Integer, nullable=False, default=0)
    dietary_restrictions = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    rsvp_at = Column(DateTime(timezone=True), nullable=False)

    @property
    def head_count(self) -> int:
        """The user plus their guests."""
        return 1 + (self.guest_count or 0)
