"""EventInvitation ORM model: grants access to private events."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from registrar.database import Base


class InvitationStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"


class EventInvitation(Base):
    __tablename__ = "event_invitations"
    __table_args__ = (UniqueConstraint("event_id", "invited_user_id", name="uq_invitation_event_user"),)

    invitation_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    invited_user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    invited_by_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    status = Column(SAEnum(InvitationStatus), nullable=False, default=InvitationStatus.pending)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    responded_at = Column(DateTime(timezone=True), nullable=True)
