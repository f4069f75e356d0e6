"""Calendar ORM model. The calendar owner may administer every event in it."""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from registrar.database import Base


class Calendar(Base):
    __tablename__ = "calendars"

    calendar_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    color = Column(String(7), nullable=False, default="#6366f1")
    owner_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    events = relationship("Event", back_populates="calendar")
