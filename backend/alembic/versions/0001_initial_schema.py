"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the RSVP registrar:
users, calendars, events, event_invitations, event_rsvps,
event_approval_requests, event_attendees.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

invitation_status = sa.Enum("pending", "accepted", "declined", name="invitationstatus")
rsvp_status = sa.Enum("going", "maybe", "not_going", "waitlisted", name="rsvpstatus")
approval_status = sa.Enum("pending", "approved", "rejected", name="approvalstatus")
attendee_type = sa.Enum("creator", "invited", "registered", name="attendeetype")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("username", sa.String(50), nullable=True, unique=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- calendars ---
    op.create_table(
        "calendars",
        sa.Column("calendar_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("color", sa.String(7), nullable=False, server_default="#6366f1"),
        sa.Column("owner_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("calendar_id", sa.String(36), sa.ForeignKey("calendars.calendar_id"), nullable=False),
        sa.Column("created_by_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("start_time_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(500), nullable=True),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("requires_approval", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("has_capacity_limit", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("capacity", sa.Integer, nullable=True),
        sa.Column("waiting_list", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- event_invitations ---
    op.create_table(
        "event_invitations",
        sa.Column("invitation_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False, index=True),
        sa.Column("invited_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False, index=True),
        sa.Column("invited_by_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("status", invitation_status, nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("event_id", "invited_user_id", name="uq_invitation_event_user"),
    )

    # --- event_rsvps ---
    op.create_table(
        "event_rsvps",
        sa.Column("rsvp_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("status", rsvp_status, nullable=False),
        sa.Column("guest_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("dietary_restrictions", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("rsvp_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("event_id", "user_id", name="uq_rsvp_event_user"),
        sa.CheckConstraint("guest_count >= 0", name="check_rsvp_guest_count_non_negative"),
    )
    op.create_index("ix_rsvp_event_status", "event_rsvps", ["event_id", "status"])

    # --- event_approval_requests ---
    op.create_table(
        "event_approval_requests",
        sa.Column("request_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("status", approval_status, nullable=False, server_default="pending"),
        sa.Column("guest_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("review_notes", sa.Text, nullable=True),
        sa.UniqueConstraint("event_id", "user_id", name="uq_approval_event_user"),
    )
    op.create_index("ix_approval_event_status", "event_approval_requests", ["event_id", "status"])

    # --- event_attendees ---
    op.create_table(
        "event_attendees",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("attendee_type", attendee_type, nullable=False, server_default="registered"),
        sa.Column("checked_in", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_event_attendees_user_id", "event_attendees", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_event_attendees_user_id", table_name="event_attendees")
    op.drop_table("event_attendees")
    op.drop_index("ix_approval_event_status", table_name="event_approval_requests")
    op.drop_table("event_approval_requests")
    op.drop_index("ix_rsvp_event_status", table_name="event_rsvps")
    op.drop_table("event_rsvps")
    op.drop_table("event_invitations")
    op.drop_table("events")
    op.drop_table("calendars")
    op.drop_table("users")
    bind = op.get_bind()
    for enum_type in (attendee_type, approval_status, rsvp_status, invitation_status):
        enum_type.drop(bind, checkfirst=True)
