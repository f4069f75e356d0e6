"""Moving-window rate limiter shared by every registration write.

Backed by ``limits``: a process-wide ``MemoryStorage`` holds one timestamp
list per (user, action[, resource]) key, created on first hit and expired by
the storage once every entry has left the window.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from limits import RateLimitItem, RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

from registrar.config import settings
from registrar.errors import rate_limited

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimit:
    requests: int
    window_seconds: int

    def item(self) -> RateLimitItem:
        return RateLimitItemPerSecond(self.requests, self.window_seconds)


RATE_LIMITS: dict[str, RateLimit] = {
    # Calendar operations
    "createCalendar": RateLimit(5, 60),
    "updateCalendar": RateLimit(10, 60),
    "deleteCalendar": RateLimit(3, 60),
    # Event operations
    "createEvent": RateLimit(10, 60),
    "updateEvent": RateLimit(20, 60),
    "deleteEvent": RateLimit(5, 60),
    # Registration operations
    "updateRSVP": RateLimit(20, 60),
    "reviewApproval": RateLimit(30, 60),
    "manageAttendees": RateLimit(60, 60),
    # User operations
    "updateProfile": RateLimit(5, 60),
    # Social operations
    "sendMessage": RateLimit(30, 60),
    "sendInvitation": RateLimit(20, 60),
    "reportContent": RateLimit(5, 300),
    # Authentication-related
    "sendEmail": RateLimit(3, 300),
    # General API calls
    "default": RateLimit(100, 60),
}


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    reset_at: Optional[datetime] = None


@dataclass(frozen=True)
class RateLimitStatus:
    limit: int
    remaining: int
    reset_at: Optional[datetime]


def _to_datetime(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def _identifiers(user_id: str, action: str, identifier: Optional[str] = None) -> tuple[str, ...]:
    if identifier:
        return (str(user_id), action, str(identifier))
    return (str(user_id), action)


class RateLimiter:
    """Per-(user, action[, resource]) moving-window counter."""

    def __init__(self, limits: Optional[dict[str, RateLimit]] = None, storage: Optional[MemoryStorage] = None):
        self.limits = limits if limits is not None else RATE_LIMITS
        self.storage = storage if storage is not None else MemoryStorage()
        self.strategy = MovingWindowRateLimiter(self.storage)

    def limit_for(self, action: str) -> RateLimit:
        return self.limits.get(action) or self.limits["default"]

    def check(self, user_id: str, action: str, identifier: Optional[str] = None) -> RateLimitResult:
        """Count one request if it fits in the window, otherwise report when it will."""
        config = self.limit_for(action)
        item = config.item()
        keys = _identifiers(user_id, action, identifier)

        allowed = self.strategy.hit(item, *keys)
        reset_at = _to_datetime(self.strategy.get_window_stats(item, *keys).reset_time)
        if not allowed:
            logger.info("Rate limit hit for %s (%d per %ss)", ":".join(keys), config.requests, config.window_seconds)
        return RateLimitResult(allowed=allowed, reset_at=reset_at)

    def enforce(self, user_id: str, action: str, identifier: Optional[str] = None) -> None:
        """Raise ``RateLimited`` when the caller is over the limit for ``action``."""
        if not settings.RATE_LIMITING_ENABLED:
            return
        result = self.check(user_id, action, identifier)
        if not result.allowed:
            raise rate_limited(action, result.reset_at)

    def status(self, user_id: str, action: str, identifier: Optional[str] = None) -> RateLimitStatus:
        """Read-only view of the window; does not consume a request."""
        config = self.limit_for(action)
        stats = self.strategy.get_window_stats(config.item(), *_identifiers(user_id, action, identifier))
        used = config.requests - stats.remaining
        return RateLimitStatus(
            limit=config.requests,
            remaining=max(0, stats.remaining),
            reset_at=_to_datetime(stats.reset_time) if used > 0 else None,
        )

    def reset(self, user_id: str, action: Optional[str] = None, identifier: Optional[str] = None) -> int:
        """Drop recorded requests for a user, for one action or every configured one.

        Returns the number of records cleared.
        """
        actions = [action] if action else list(self.limits)
        cleared = 0
        for name in actions:
            config = self.limit_for(name)
            item = config.item()
            keys = _identifiers(user_id, name, identifier)
            cleared += config.requests - self.strategy.get_window_stats(item, *keys).remaining
            self.strategy.clear(item, *keys)
        logger.info("Cleared %d rate limit records for user %s (action=%s)", cleared, user_id, action)
        return cleared

    def clear(self) -> None:
        self.storage.reset()


rate_limiter = RateLimiter()
