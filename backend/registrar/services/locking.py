"""Per-event serialization for registration writes.

Two layers: a process-wide keyed mutex (so threads in one worker queue up
per event) and ``SELECT ... FOR UPDATE`` on the event row (so workers in
different processes do the same on PostgreSQL; SQLite ignores it).
"""
import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from registrar.config import settings
from registrar.errors import not_found, unavailable
from registrar.models.event import Event

logger = logging.getLogger(__name__)


class LockTimeout(Exception):
    """Raised when a keyed lock cannot be acquired in time."""


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


class KeyedLock:
    """A mutex per key, created on demand and dropped once nobody holds or waits on it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    @contextmanager
    def hold(self, key: str, timeout: float = -1) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.holders += 1

        acquired = entry.lock.acquire(timeout=timeout)
        try:
            if not acquired:
                raise LockTimeout(key)
            yield
        finally:
            if acquired:
                entry.lock.release()
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


event_locks = KeyedLock()


@contextmanager
def event_guard(db: Session, event_id: str) -> Iterator[Event]:
    """Serialize a read-check-write unit on one event and yield the locked event.

    The caller commits inside the block; anything left uncommitted when the
    block exits with an error is rolled back before the lock is released.
    """
    try:
        with event_locks.hold(str(event_id), timeout=settings.EVENT_LOCK_TIMEOUT_SECONDS):
            try:
                event = (
                    db.query(Event)
                    .filter(Event.event_id == str(event_id))
                    .populate_existing()
                    .with_for_update()
                    .first()
                )
                if not event:
                    raise not_found("Event not found")
                yield event
            except BaseException:
                db.rollback()
                raise
    except LockTimeout as exc:
        logger.warning("Lock wait on event %s exceeded %.1fs", event_id, settings.EVENT_LOCK_TIMEOUT_SECONDS)
        raise unavailable("Event is busy, please retry") from exc
