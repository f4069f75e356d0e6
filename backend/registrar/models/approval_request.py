"""ApprovalRequest ORM model: one request slot per (event, user), overwritten on resubmission."""
import uuid
import enum
from sqlalchemy import (
    Column, String, Text, Integer, DateTime, ForeignKey, Index, UniqueConstraint, Enum as SAEnum,
)
from registrar.database import Base


class ApprovalStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ReviewAction(str, enum.Enum):
    approve = "approve"
    reject = "reject"


class ApprovalRequest(Base):
    __tablename__ = "event_approval_requests"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_approval_event_user"),
        Index("ix_approval_event_status", "event_id", "status"),
    )

    request_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    status = Column(SAEnum(ApprovalStatus), nullable=False, default=ApprovalStatus.pending)
    guest_count = Column(Integer, nullable=False, default=0)
    message = Column(Text, nullable=True)
    requested_at = Column(DateTime(timezone=True), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(String(36), ForeignKey("users.user_id"), nullable=True)
    review_notes = Column(Text, nullable=True)

    @property
    def head_count(self) -> int:
        return 1 + (self.guest_count or 0)
