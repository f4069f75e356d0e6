"""Tests for per-event serialization under concurrent writers.

Threads race through separate sessions the way concurrent requests would.
The capacity ceiling must hold for every interleaving.
"""
import threading

import pytest

from registrar.config import settings
from registrar.errors import ErrorKind, RegistrationError
from registrar.models.approval_request import ReviewAction
from registrar.models.rsvp import EventRSVP, RSVPStatus
from registrar.services import approval_service, registration_service
from registrar.services.locking import KeyedLock, LockTimeout, event_guard, event_locks
from tests.conftest import as_user, create_test_user, setup_event


def _race(session_factory, targets):
    """Run each ``target(db)`` on its own thread and session; collect results or errors."""
    barrier = threading.Barrier(len(targets))
    outcomes = [None] * len(targets)

    def run(i, target):
        db = session_factory()
        try:
            barrier.wait()
            outcomes[i] = target(db)
        except RegistrationError as exc:
            outcomes[i] = exc
        finally:
            db.close()

    threads = [threading.Thread(target=run, args=(i, t)) for i, t in enumerate(targets)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return outcomes


def _going_heads(db, event_id):
    rsvps = db.query(EventRSVP).filter(EventRSVP.event_id == event_id, EventRSVP.status == RSVPStatus.going).all()
    return sum(r.head_count for r in rsvps)


class TestCapacityRace:

    def test_last_slot_goes_to_exactly_one(self, client, session_factory, db):
        _, event = setup_event(client, has_capacity_limit=True, capacity=1)
        users = [create_test_user(client, name=f"U{i}") for i in range(8)]

        outcomes = _race(session_factory, [
            (lambda db, uid=u["user_id"]: registration_service.upsert_rsvp(db, event["event_id"], uid, RSVPStatus.going))
            for u in users
        ])

        winners = [o for o in outcomes if not isinstance(o, RegistrationError)]
        losers = [o for o in outcomes if isinstance(o, RegistrationError)]
        assert len(winners) == 1
        assert all(e.kind == ErrorKind.capacity_exceeded for e in losers)
        assert _going_heads(db, event["event_id"]) == 1

    def test_mixed_guest_counts_never_exceed_capacity(self, client, session_factory, db):
        _, event = setup_event(client, has_capacity_limit=True, capacity=5)
        users = [create_test_user(client, name=f"U{i}") for i in range(10)]

        outcomes = _race(session_factory, [
            (lambda db, uid=u["user_id"], g=i % 3: registration_service.upsert_rsvp(
                db, event["event_id"], uid, RSVPStatus.going, guest_count=g))
            for i, u in enumerate(users)
        ])

        assert any(not isinstance(o, RegistrationError) for o in outcomes)
        assert _going_heads(db, event["event_id"]) <= 5

    def test_waiting_list_race_admits_only_up_to_capacity(self, client, session_factory, db):
        _, event = setup_event(client, has_capacity_limit=True, capacity=2, waiting_list=True)
        users = [create_test_user(client, name=f"U{i}") for i in range(6)]

        outcomes = _race(session_factory, [
            (lambda db, uid=u["user_id"]: registration_service.upsert_rsvp(db, event["event_id"], uid, RSVPStatus.going))
            for u in users
        ])

        assert sum(1 for o in outcomes if not o.waitlisted) == 2
        assert sum(1 for o in outcomes if o.waitlisted) == 4
        assert _going_heads(db, event["event_id"]) == 2

    def test_reviews_and_rsvps_race(self, client, session_factory, db):
        organizer, event = setup_event(client, requires_approval=True, has_capacity_limit=True, capacity=3)
        requesters = [create_test_user(client, name=f"R{i}") for i in range(4)]
        request_ids = []
        for user in requesters:
            resp = client.post("/api/approvals/", params=as_user(user), json={"event_id": event["event_id"]})
            request_ids.append(resp.json()["request_id"])

        targets = [
            (lambda db, rid=rid: approval_service.review_approval(db, rid, organizer["user_id"], ReviewAction.approve))
            for rid in request_ids
        ]
        targets.append(
            lambda db: registration_service.upsert_rsvp(db, event["event_id"], organizer["user_id"], RSVPStatus.going)
        )
        outcomes = _race(session_factory, targets)

        failures = [o for o in outcomes if isinstance(o, RegistrationError)]
        assert len(failures) == 2
        assert all(e.kind == ErrorKind.capacity_exceeded for e in failures)
        assert _going_heads(db, event["event_id"]) == 3

    def test_concurrent_duplicate_reviews(self, client, session_factory):
        organizer, event = setup_event(client, requires_approval=True)
        guest = create_test_user(client, name="Guest")
        req = client.post("/api/approvals/", params=as_user(guest), json={"event_id": event["event_id"]}).json()

        outcomes = _race(session_factory, [
            lambda db: approval_service.review_approval(db, req["request_id"], organizer["user_id"], ReviewAction.approve),
            lambda db: approval_service.review_approval(db, req["request_id"], organizer["user_id"], ReviewAction.reject),
        ])

        errors = [o for o in outcomes if isinstance(o, RegistrationError)]
        assert len(errors) == 1
        assert errors[0].kind == ErrorKind.invalid_state


class TestKeyedLock:

    def test_entries_are_dropped_after_use(self):
        locks = KeyedLock()
        with locks.hold("a"):
            with locks.hold("b"):
                assert len(locks) == 2
        assert len(locks) == 0

    def test_timeout(self):
        locks = KeyedLock()
        acquired = threading.Event()
        release = threading.Event()

        def holder():
            with locks.hold("a"):
                acquired.set()
                release.wait(5)

        t = threading.Thread(target=holder)
        t.start()
        acquired.wait(5)
        with pytest.raises(LockTimeout):
            with locks.hold("a", timeout=0.05):
                pass
        release.set()
        t.join()
        assert len(locks) == 0

    def test_event_guard_busy_event_is_unavailable(self, client, db, monkeypatch):
        monkeypatch.setattr(settings, "EVENT_LOCK_TIMEOUT_SECONDS", 0.05)
        _, event = setup_event(client)

        with event_locks.hold(event["event_id"]):
            with pytest.raises(RegistrationError) as exc:
                with event_guard(db, event["event_id"]):
                    pass
        assert exc.value.kind == ErrorKind.unavailable
        assert exc.value.status_code == 503

    def test_event_guard_rolls_back_on_error(self, client, db):
        _, event = setup_event(client)
        guest = create_test_user(client, name="Guest")

        with pytest.raises(RuntimeError):
            with event_guard(db, event["event_id"]) as locked:
                db.add(EventRSVP(event_id=locked.event_id, user_id=guest["user_id"],
                                 status=RSVPStatus.going, guest_count=0,
                                 rsvp_at=locked.created_at))
                db.flush()
                raise RuntimeError("boom")

        assert db.query(EventRSVP).count() == 0
