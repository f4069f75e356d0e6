"""Rate limit status API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Query

from registrar.config import settings
from registrar.errors import access_denied
from registrar.schemas.rate_limit import RateLimitResetOut, RateLimitStatusOut
from registrar.services.directory import require_actor
from registrar.services.rate_limiter import rate_limiter

logger = logging.getLogger(__name__)
router = APIRouter()


def _admin_ids() -> set[str]:
    return {uid.strip() for uid in settings.ADMIN_USER_IDS.split(",") if uid.strip()}


@router.get("/status", response_model=RateLimitStatusOut)
def get_rate_limit_status(
    action: str,
    identifier: Optional[str] = None,
    actor_user_id: Optional[str] = Query(None),
):
    """How many requests the acting user has left for ``action`` (does not consume one)."""
    user_id = require_actor(actor_user_id)
    current = rate_limiter.status(user_id, action, identifier)
    return RateLimitStatusOut(action=action, limit=current.limit, remaining=current.remaining, reset_at=current.reset_at)


@router.post("/reset", response_model=RateLimitResetOut)
def reset_rate_limit(
    user_id: str,
    action: Optional[str] = None,
    identifier: Optional[str] = None,
    actor_user_id: Optional[str] = Query(None),
):
    """Clear recorded requests for a user. Emergency use, admins only."""
    actor_id = require_actor(actor_user_id)
    if actor_id not in _admin_ids():
        raise access_denied("Only administrators can reset rate limits")
    cleared = rate_limiter.reset(user_id, action, identifier)
    logger.warning("Rate limits for %s (action=%s) reset by %s", user_id, action, actor_id)
    return RateLimitResetOut(cleared=cleared)
