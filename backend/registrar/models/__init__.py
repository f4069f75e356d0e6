"""ORM models. Importing this package registers every table on ``Base.metadata``."""
from registrar.models.user import User  # noqa: F401
from registrar.models.calendar import Calendar  # noqa: F401
from registrar.models.event import Event  # noqa: F401
from registrar.models.invitation import EventInvitation, InvitationStatus  # noqa: F401
from registrar.models.rsvp import EventRSVP, RSVPStatus  # noqa: F401
from registrar.models.approval_request import ApprovalRequest, ApprovalStatus, ReviewAction  # noqa: F401
from registrar.models.attendee import EventAttendee, AttendeeType  # noqa: F401
