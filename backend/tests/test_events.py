"""Tests for event creation and its registration policy fields.

Covers:
- Creator lands on the roster as `creator`
- Calendar ownership and form validation
"""
from datetime import datetime, timezone, timedelta
from tests.conftest import as_user, create_test_calendar, create_test_event, create_test_user


def _payload(calendar_id, **overrides):
    start = datetime.now(timezone.utc) + timedelta(days=1)
    payload = {
        "calendar_id": calendar_id,
        "name": "Picnic",
        "start_time_utc": start.isoformat(),
        "end_time_utc": (start + timedelta(hours=3)).isoformat(),
    }
    payload.update(overrides)
    return payload


class TestEventCreate:

    def test_create_event(self, client):
        owner = create_test_user(client, name="Owner")
        calendar = create_test_calendar(client, owner["user_id"])
        event = create_test_event(
            client, owner["user_id"], calendar["calendar_id"], name="Gala",
            has_capacity_limit=True, capacity=50, requires_approval=True,
        )
        assert event["name"] == "Gala"
        assert event["created_by_id"] == owner["user_id"]
        assert event["capacity"] == 50
        assert event["requires_approval"] is True
        assert event["is_public"] is True

        resp = client.get(f"/api/events/{event['event_id']}")
        assert resp.status_code == 200

    def test_creator_is_on_roster(self, client):
        owner = create_test_user(client, name="Owner")
        calendar = create_test_calendar(client, owner["user_id"])
        event = create_test_event(client, owner["user_id"], calendar["calendar_id"])

        counts = client.get(f"/api/attendees/{event['event_id']}/counts").json()
        assert counts["creators"] == 1
        assert counts["total"] == 1

    def test_capacity_ignored_without_limit(self, client):
        owner = create_test_user(client, name="Owner")
        calendar = create_test_calendar(client, owner["user_id"])
        event = create_test_event(client, owner["user_id"], calendar["calendar_id"], capacity=10)
        assert event["capacity"] is None

    def test_get_event_not_found(self, client):
        assert client.get("/api/events/missing").status_code == 404


class TestEventValidation:

    def _post(self, client, actor, calendar_id, **overrides):
        return client.post("/api/events/", params=as_user(actor), json=_payload(calendar_id, **overrides))

    def test_only_calendar_owner(self, client):
        owner = create_test_user(client, name="Owner")
        other = create_test_user(client, name="Other")
        calendar = create_test_calendar(client, owner["user_id"])
        resp = self._post(client, other, calendar["calendar_id"])
        assert resp.status_code == 403

    def test_unknown_calendar(self, client):
        owner = create_test_user(client, name="Owner")
        assert self._post(client, owner, "missing").status_code == 404

    def test_end_before_start(self, client):
        owner = create_test_user(client, name="Owner")
        calendar = create_test_calendar(client, owner["user_id"])
        start = datetime.now(timezone.utc) + timedelta(days=1)
        resp = self._post(
            client, owner, calendar["calendar_id"],
            start_time_utc=start.isoformat(), end_time_utc=(start - timedelta(hours=1)).isoformat(),
        )
        assert resp.status_code == 422
        assert resp.json()["detail"]["kind"] == "InvalidInput"

    def test_blank_name(self, client):
        owner = create_test_user(client, name="Owner")
        calendar = create_test_calendar(client, owner["user_id"])
        assert self._post(client, owner, calendar["calendar_id"], name="   ").status_code == 422

    def test_long_name(self, client):
        owner = create_test_user(client, name="Owner")
        calendar = create_test_calendar(client, owner["user_id"])
        assert self._post(client, owner, calendar["calendar_id"], name="x" * 201).status_code == 422

    def test_limited_event_needs_capacity(self, client):
        owner = create_test_user(client, name="Owner")
        calendar = create_test_calendar(client, owner["user_id"])
        resp = self._post(client, owner, calendar["calendar_id"], has_capacity_limit=True, capacity=0)
        assert resp.status_code == 422
