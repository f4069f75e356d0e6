"""Tests for invitations and how acceptance feeds the roster."""
from tests.conftest import as_user, create_test_user, setup_event


def _invite(client, event, organizer, user):
    return client.post(
        "/api/invitations/",
        params=as_user(organizer),
        json={"event_id": event["event_id"], "invited_user_id": user["user_id"]},
    )


def _respond(client, invitation, user, status):
    return client.post(
        f"/api/invitations/{invitation['invitation_id']}/respond",
        params=as_user(user),
        json={"status": status},
    )


class TestInvitations:

    def test_invite_and_accept(self, client):
        organizer, event = setup_event(client, is_public=False)
        friend = create_test_user(client, name="Friend")

        resp = _invite(client, event, organizer, friend)
        assert resp.status_code == 201, resp.text
        invitation = resp.json()
        assert invitation["status"] == "pending"

        resp = _respond(client, invitation, friend, "accepted")
        assert resp.status_code == 200
        assert resp.json()["status"] == "accepted"
        assert resp.json()["responded_at"] is not None

        counts = client.get(f"/api/attendees/{event['event_id']}/counts").json()
        assert counts["invited"] == 1

    def test_decline_adds_nobody(self, client):
        organizer, event = setup_event(client)
        friend = create_test_user(client, name="Friend")
        invitation = _invite(client, event, organizer, friend).json()
        _respond(client, invitation, friend, "declined")
        assert client.get(f"/api/attendees/{event['event_id']}/counts").json()["invited"] == 0

    def test_only_organizer_invites(self, client):
        _, event = setup_event(client)
        a = create_test_user(client, name="A")
        b = create_test_user(client, name="B")
        assert _invite(client, event, a, b).status_code == 403

    def test_duplicate_invitation(self, client):
        organizer, event = setup_event(client)
        friend = create_test_user(client, name="Friend")
        _invite(client, event, organizer, friend)
        resp = _invite(client, event, organizer, friend)
        assert resp.status_code == 409
        assert resp.json()["detail"]["kind"] == "AlreadyExists"

    def test_cannot_invite_self(self, client):
        organizer, event = setup_event(client)
        assert _invite(client, event, organizer, organizer).status_code == 422

    def test_only_invitee_responds(self, client):
        organizer, event = setup_event(client)
        friend = create_test_user(client, name="Friend")
        invitation = _invite(client, event, organizer, friend).json()
        assert _respond(client, invitation, organizer, "accepted").status_code == 403

    def test_respond_twice(self, client):
        organizer, event = setup_event(client)
        friend = create_test_user(client, name="Friend")
        invitation = _invite(client, event, organizer, friend).json()
        _respond(client, invitation, friend, "accepted")
        resp = _respond(client, invitation, friend, "declined")
        assert resp.status_code == 409
        assert resp.json()["detail"]["kind"] == "InvalidState"
