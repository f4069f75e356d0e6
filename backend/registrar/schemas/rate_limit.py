"""Pydantic schemas for rate limit status."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class RateLimitStatusOut(BaseModel):
    action: str
    limit: int
    remaining: int
    reset_at: Optional[datetime] = None


class RateLimitResetOut(BaseModel):
    cleared: int
