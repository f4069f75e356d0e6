"""Tests for the attendee roster.

Covers:
- Creator protection on removal
- Check-in / check-out state transitions and organizer-only access
- RemoveAttendee fan-out (RSVP, invitation, approval)
- Counts, enriched listing, private-event visibility, attendance history
"""
from tests.conftest import as_user, create_test_user, rsvp, setup_event


def _check(client, event, organizer, user, direction="check-in"):
    return client.post(
        f"/api/attendees/{event['event_id']}/{direction}",
        params=as_user(organizer),
        json={"user_id": user["user_id"]},
    )


def _remove(client, event, organizer, user):
    return client.delete(f"/api/attendees/{event['event_id']}/{user['user_id']}", params=as_user(organizer))


class TestCheckIn:

    def test_check_in_and_out(self, client):
        organizer, event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        rsvp(client, event, guest)

        resp = _check(client, event, organizer, guest)
        assert resp.status_code == 200, resp.text
        assert resp.json()["checked_in"] is True
        assert resp.json()["checked_in_at"] is not None

        resp = _check(client, event, organizer, guest, "check-out")
        assert resp.status_code == 200
        assert resp.json()["checked_in"] is False
        assert resp.json()["checked_in_at"] is None

    def test_double_check_in(self, client):
        organizer, event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        rsvp(client, event, guest)
        _check(client, event, organizer, guest)
        resp = _check(client, event, organizer, guest)
        assert resp.status_code == 409
        assert resp.json()["detail"]["kind"] == "AlreadyExists"

    def test_check_out_without_check_in(self, client):
        organizer, event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        rsvp(client, event, guest)
        resp = _check(client, event, organizer, guest, "check-out")
        assert resp.status_code == 409
        assert resp.json()["detail"]["kind"] == "InvalidState"

    def test_not_an_attendee(self, client):
        organizer, event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        resp = _check(client, event, organizer, guest)
        assert resp.status_code == 404

    def test_organizer_only(self, client):
        _, event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        rsvp(client, event, guest)
        resp = _check(client, event, guest, guest)
        assert resp.status_code == 403

    def test_creator_can_be_checked_in(self, client):
        organizer, event = setup_event(client)
        assert _check(client, event, organizer, organizer).status_code == 200


class TestRemoveAttendee:

    def test_creator_is_protected(self, client):
        organizer, event = setup_event(client)
        resp = _remove(client, event, organizer, organizer)
        assert resp.status_code == 409
        assert resp.json()["detail"]["kind"] == "InvalidState"
        assert client.get(f"/api/attendees/{event['event_id']}/counts").json()["creators"] == 1

    def test_remove_registered_attendee(self, client):
        organizer, event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        rsvp(client, event, guest)

        assert _remove(client, event, organizer, guest).status_code == 204
        assert client.get(f"/api/rsvps/{event['event_id']}", params=as_user(guest)).json() is None
        assert client.get(f"/api/attendees/{event['event_id']}/counts").json()["registered"] == 0

    def test_remove_declines_accepted_invitation(self, client):
        organizer, event = setup_event(client, is_public=False)
        friend = create_test_user(client, name="Friend")
        inv = client.post("/api/invitations/", params=as_user(organizer),
                          json={"event_id": event["event_id"], "invited_user_id": friend["user_id"]}).json()
        client.post(f"/api/invitations/{inv['invitation_id']}/respond", params=as_user(friend),
                    json={"status": "accepted"})

        assert _remove(client, event, organizer, friend).status_code == 204
        # Without an accepted invitation the friend can no longer register
        assert rsvp(client, event, friend).json()["detail"]["kind"] == "AccessDenied"

    def test_remove_releases_approved_seat(self, client):
        organizer, event = setup_event(client, requires_approval=True, has_capacity_limit=True, capacity=1)
        a = create_test_user(client, name="A")
        b = create_test_user(client, name="B")
        req = client.post("/api/approvals/", params=as_user(a), json={"event_id": event["event_id"]}).json()
        client.post(f"/api/approvals/{req['request_id']}/review", params=as_user(organizer),
                    json={"action": "approve"})

        assert _remove(client, event, organizer, a).status_code == 204
        summary = client.get(f"/api/rsvps/{event['event_id']}/summary").json()
        assert summary["spots_remaining"] == 1
        assert client.post("/api/approvals/", params=as_user(b),
                           json={"event_id": event["event_id"]}).status_code == 201

    def test_remove_unknown_attendee(self, client):
        organizer, event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        assert _remove(client, event, organizer, guest).status_code == 404

    def test_non_organizer(self, client):
        organizer, event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        rsvp(client, event, guest)
        assert _remove(client, event, guest, organizer).status_code == 403


class TestRosterQueries:

    def test_counts(self, client):
        organizer, event = setup_event(client)
        a = create_test_user(client, name="A")
        b = create_test_user(client, name="B")
        rsvp(client, event, a)
        rsvp(client, event, b)
        _check(client, event, organizer, a)

        counts = client.get(f"/api/attendees/{event['event_id']}/counts").json()
        assert counts == {"total": 3, "creators": 1, "invited": 0, "registered": 2, "checked_in": 1}

    def test_list_is_enriched(self, client):
        organizer, event = setup_event(client)
        guest = create_test_user(client, name="Guest", username="guest1")
        rsvp(client, event, guest, guest_count=1, dietary_restrictions="None")

        rows = client.get(f"/api/attendees/{event['event_id']}", params=as_user(guest)).json()
        assert [r["attendee_type"] for r in rows] == ["creator", "registered"]
        entry = rows[1]
        assert entry["user"]["username"] == "guest1"
        assert entry["rsvp"]["guest_count"] == 1
        assert rows[0]["rsvp"] is None

    def test_filter_by_type(self, client):
        organizer, event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        rsvp(client, event, guest)
        rows = client.get(
            f"/api/attendees/{event['event_id']}",
            params={**as_user(organizer), "attendee_type": "creator"},
        ).json()
        assert [r["user_id"] for r in rows] == [organizer["user_id"]]

    def test_private_event_visibility(self, client):
        organizer, event = setup_event(client, is_public=False)
        stranger = create_test_user(client, name="Stranger")
        resp = client.get(f"/api/attendees/{event['event_id']}", params=as_user(stranger))
        assert resp.status_code == 403
        assert client.get(f"/api/attendees/{event['event_id']}", params=as_user(organizer)).status_code == 200

    def test_attendance_history(self, client):
        organizer, event = setup_event(client)
        _, other_event = setup_event(client)
        guest = create_test_user(client, name="Guest")
        rsvp(client, event, guest)
        rsvp(client, other_event, guest)

        history = client.get("/api/attendees/history", params=as_user(guest)).json()
        assert {h["event_id"] for h in history} == {event["event_id"], other_event["event_id"]}
        assert all(h["attendee_type"] == "registered" for h in history)
        assert history[0]["event"]["calendar"]["name"] == "Test Calendar"

        organizer_history = client.get("/api/attendees/history", params=as_user(organizer)).json()
        assert [h["attendee_type"] for h in organizer_history] == ["creator"]
