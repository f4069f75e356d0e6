"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from registrar.config import settings
from registrar.database import Base, engine
from registrar.logging_config import setup_logging

# Import routers
from registrar.routers import users, calendars, events, invitations, rsvps, approvals, attendees, rate_limits

# Import all models so Base.metadata knows about them
import registrar.models  # noqa: F401

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="RSVP Registrar",
    description="Event registration: RSVPs, approval gating, capacity and waiting lists, attendee rosters",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(calendars.router, prefix="/api/calendars", tags=["Calendars"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(invitations.router, prefix="/api/invitations", tags=["Invitations"])
app.include_router(rsvps.router, prefix="/api/rsvps", tags=["RSVPs"])
app.include_router(approvals.router, prefix="/api/approvals", tags=["Approvals"])
app.include_router(attendees.router, prefix="/api/attendees", tags=["Attendees"])
app.include_router(rate_limits.router, prefix="/api/rate-limits", tags=["RateLimits"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    logger.info("Registrar started (rate limiting %s)", "on" if settings.RATE_LIMITING_ENABLED else "off")


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
