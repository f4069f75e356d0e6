"""Retry wrapper for registration units of work.

Transient storage failures are rolled back and retried with exponential
backoff; once retries are exhausted the caller gets ``Unavailable``.
"""
import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

from registrar.config import settings
from registrar.errors import unavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def storage_retry(func: Callable[..., T]) -> Callable[..., T]:
    """Decorate a ``func(db, ...)`` unit of work with rollback-and-retry on storage errors."""

    @wraps(func)
    def wrapper(db: Session, *args: Any, **kwargs: Any) -> T:
        retrying = Retrying(
            stop=stop_after_attempt(settings.STORAGE_RETRY_ATTEMPTS),
            wait=wait_exponential(
                multiplier=settings.STORAGE_RETRY_BASE_DELAY,
                max=settings.STORAGE_RETRY_MAX_DELAY,
            ),
            retry=retry_if_exception_type(OperationalError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    try:
                        return func(db, *args, **kwargs)
                    except OperationalError:
                        db.rollback()
                        raise
        except OperationalError as exc:
            logger.error(
                "Storage failure in %s after %d attempts: %s",
                func.__name__, settings.STORAGE_RETRY_ATTEMPTS, exc,
            )
            raise unavailable() from exc

    return wrapper
