"""Event ORM model: carries the registration policy of an event."""
import uuid
from sqlalchemy import Column, String, Text, DateTime, Integer, Boolean, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from registrar.database import Base


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    calendar_id = Column(String(36), ForeignKey("calendars.calendar_id"), nullable=False)
    created_by_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_time_utc = Column(DateTime(timezone=True), nullable=False)
    end_time_utc = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(500), nullable=True)

    # Registration policy
    is_public = Column(Boolean, nullable=False, default=True)
    requires_approval = Column(Boolean, nullable=False, default=False)
    has_capacity_limit = Column(Boolean, nullable=False, default=False)
    capacity = Column(Integer, nullable=True)
    waiting_list = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    calendar = relationship("Calendar", back_populates="events")

    @property
    def capacity_limited(self) -> bool:
        """True when a ceiling is configured and enforced."""
        return bool(self.has_capacity_limit and self.capacity is not None)
