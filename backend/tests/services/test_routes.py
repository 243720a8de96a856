"""HTTP routes — identity headers, status mapping and response shapes.

Tests:
    - Missing/malformed X-User-Id → 401; revoked X-Token-Id → 401
    - Domain errors render the structured error envelope with mapped status
    - Invite returns 201 for a new invitation, 200 + already_invited for a repeat
    - Respond returns the team name
    - Event edit and admin moderation enforce their rights over HTTP
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4


async def _register(client, name: str) -> str:
    resp = await client.post(
        "/api/v1/users", json={"email": f"{name}@example.com", "username": name},
    )
    assert resp.status_code == 201
    return resp.json()["id"]


def _as(user_id: str, **extra) -> dict:
    return {"X-User-Id": user_id, **extra}


async def _create_team(client, organizer: str, is_open: bool = True) -> str:
    resp = await client.post(
        "/api/v1/teams",
        json={"name": "  Robotics Club ", "is_open": is_open},
        headers=_as(organizer),
    )
    assert resp.status_code == 201
    return resp.json()["id"]


# --- health / users ---------------------------------------------------------------

async def test_health_endpoints(client):
    live = await client.get("/api/v1/health/")
    ready = await client.get("/api/v1/health/ready")
    assert live.json()["status"] == "healthy"
    assert ready.status_code == 200


async def test_duplicate_email_conflict(client):
    await _register(client, "alice")
    resp = await client.post(
        "/api/v1/users", json={"email": "ALICE@example.com", "username": "alice2"},
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "DUPLICATE_EMAIL"


async def test_unknown_user_404(client):
    resp = await client.get(f"/api/v1/users/{uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


# --- identity ---------------------------------------------------------------------

async def test_missing_identity_header_401(client):
    resp = await client.get("/api/v1/teams")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHENTICATED"


async def test_malformed_identity_header_401(client):
    resp = await client.get("/api/v1/teams", headers=_as("not-a-uuid"))
    assert resp.status_code == 401


async def test_revoked_token_401(client):
    alice = await _register(client, "alice")
    expires = (datetime.now(timezone.utc) + timedelta(hours=1)).isoformat()
    revoke = await client.post(
        "/api/v1/tokens/revoke",
        json={"jti": "token-1", "expires_at": expires},
        headers=_as(alice, **{"X-Token-Id": "token-1"}),
    )
    assert revoke.json() == {"success": True, "revoked": True}

    resp = await client.get("/api/v1/teams", headers=_as(alice, **{"X-Token-Id": "token-1"}))
    assert resp.status_code == 401
    ok = await client.get("/api/v1/teams", headers=_as(alice, **{"X-Token-Id": "token-2"}))
    assert ok.status_code == 200


# --- teams ------------------------------------------------------------------------

async def test_create_team_response_lists_organizer(client):
    alice = await _register(client, "alice")
    resp = await client.post(
        "/api/v1/teams", json={"name": " Chess ", "description": "d"}, headers=_as(alice),
    )
    body = resp.json()
    assert body["name"] == "Chess"
    assert body["organizer_id"] == alice
    assert body["members"][0] == {
        "user_id": alice, "role": "organizer", "joined_at": body["members"][0]["joined_at"],
    }


async def test_blank_team_name_validation_error(client):
    alice = await _register(client, "alice")
    resp = await client.post("/api/v1/teams", json={"name": "   "}, headers=_as(alice))
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_join_closed_team_400(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    team_id = await _create_team(client, alice, is_open=False)

    resp = await client.post(f"/api/v1/teams/{team_id}/join", headers=_as(bob))
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "TEAM_CLOSED"


async def test_join_leave_and_mine(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    team_id = await _create_team(client, alice)

    joined = await client.post(f"/api/v1/teams/{team_id}/join", headers=_as(bob))
    assert joined.json()["success"] is True
    mine = await client.get("/api/v1/teams/mine", headers=_as(bob))
    assert [t["id"] for t in mine.json()] == [team_id]

    left = await client.post(f"/api/v1/teams/{team_id}/leave", headers=_as(bob))
    assert left.status_code == 200
    again = await client.post(f"/api/v1/teams/{team_id}/leave", headers=_as(bob))
    assert again.json()["error"]["code"] == "NOT_MEMBER"


async def test_kick_by_member_forbidden(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    team_id = await _create_team(client, alice)
    await client.post(f"/api/v1/teams/{team_id}/join", headers=_as(bob))

    resp = await client.post(
        f"/api/v1/teams/{team_id}/kick", json={"user_id": alice}, headers=_as(bob),
    )
    assert resp.status_code == 403


async def test_transfer_ownership_and_members(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    team_id = await _create_team(client, alice)
    await client.post(f"/api/v1/teams/{team_id}/join", headers=_as(bob))

    resp = await client.post(
        f"/api/v1/teams/{team_id}/transfer-ownership",
        json={"new_organizer_id": bob}, headers=_as(alice),
    )
    assert resp.json()["organizer_id"] == bob
    members = await client.get(f"/api/v1/teams/{team_id}/members", headers=_as(alice))
    assert {m["user_id"]: m["role"] for m in members.json()} == {
        alice: "member", bob: "organizer",
    }


async def test_assign_organizer_role_rejected(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    team_id = await _create_team(client, alice)
    await client.post(f"/api/v1/teams/{team_id}/join", headers=_as(bob))

    resp = await client.post(
        f"/api/v1/teams/{team_id}/assign-role",
        json={"user_id": bob, "role": "organizer"}, headers=_as(alice),
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ROLE_REQUIRES_TRANSFER"


async def test_delete_team(client):
    alice = await _register(client, "alice")
    team_id = await _create_team(client, alice)

    resp = await client.delete(f"/api/v1/teams/{team_id}", headers=_as(alice))
    assert resp.status_code == 200
    gone = await client.get(f"/api/v1/teams/{team_id}", headers=_as(alice))
    assert gone.status_code == 404


# --- invitations ------------------------------------------------------------------

async def test_invite_then_repeat_reports_already_invited(client):
    alice = await _register(client, "alice")
    await _register(client, "bob")
    team_id = await _create_team(client, alice)
    payload = {"team_id": team_id, "invited_user_email": "bob@example.com"}

    first = await client.post("/api/v1/invitations", json=payload, headers=_as(alice))
    assert first.status_code == 201
    assert first.json()["already_invited"] is False

    second = await client.post("/api/v1/invitations", json=payload, headers=_as(alice))
    assert second.status_code == 200
    body = second.json()
    assert body["already_invited"] is True
    assert body["id"] == first.json()["id"]
    assert "Robotics Club" in body["message"]


async def test_invite_requires_exactly_one_invitee(client):
    alice = await _register(client, "alice")
    team_id = await _create_team(client, alice)

    resp = await client.post(
        "/api/v1/invitations",
        json={
            "team_id": team_id,
            "invited_user_id": str(uuid4()),
            "invited_user_email": "x@example.com",
        },
        headers=_as(alice),
    )
    assert resp.status_code == 400


async def test_non_organizer_invite_forbidden(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    carol = await _register(client, "carol")
    team_id = await _create_team(client, alice)

    resp = await client.post(
        "/api/v1/invitations",
        json={"team_id": team_id, "invited_user_id": carol},
        headers=_as(bob),
    )
    assert resp.status_code == 403


async def test_accept_flow_returns_team_name(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    team_id = await _create_team(client, alice, is_open=False)
    invite = await client.post(
        "/api/v1/invitations",
        json={"team_id": team_id, "invited_user_id": bob},
        headers=_as(alice),
    )
    invitation_id = invite.json()["id"]

    mine = await client.get("/api/v1/invitations/mine", headers=_as(bob))
    assert [i["id"] for i in mine.json()] == [invitation_id]

    resp = await client.post(
        "/api/v1/invitations/respond",
        json={"invitation_id": invitation_id, "accept": True},
        headers=_as(bob),
    )
    assert resp.json() == {
        "success": True, "id": invitation_id, "accepted": True,
        "team_name": "Robotics Club",
    }

    again = await client.post(
        "/api/v1/invitations/respond",
        json={"invitation_id": invitation_id, "accept": False},
        headers=_as(bob),
    )
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_RESPONDED"

    detail = await client.get(f"/api/v1/invitations/{invitation_id}", headers=_as(alice))
    assert detail.json()["status"] == "accepted"


async def test_withdraw_invitation(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    team_id = await _create_team(client, alice)
    invite = await client.post(
        "/api/v1/invitations",
        json={"team_id": team_id, "invited_user_id": bob},
        headers=_as(alice),
    )
    invitation_id = invite.json()["id"]

    resp = await client.delete(f"/api/v1/invitations/{invitation_id}", headers=_as(alice))
    assert resp.status_code == 200
    listing = await client.get(f"/api/v1/invitations/team/{team_id}", headers=_as(alice))
    assert listing.json() == []
    gone = await client.delete(f"/api/v1/invitations/{invitation_id}", headers=_as(alice))
    assert gone.status_code == 404


# --- activity ---------------------------------------------------------------------

async def test_events_and_messages(client):
    alice = await _register(client, "alice")
    team_id = await _create_team(client, alice)

    event = await client.post(
        f"/api/v1/teams/{team_id}/events",
        json={"name": "Kickoff", "date": "2030-05-17T18:00:00Z"},
        headers=_as(alice),
    )
    assert event.status_code == 201
    message = await client.post(
        f"/api/v1/teams/{team_id}/messages", json={"message": "hello"}, headers=_as(alice),
    )
    assert message.status_code == 201

    events = await client.get(f"/api/v1/teams/{team_id}/events", headers=_as(alice))
    messages = await client.get(f"/api/v1/teams/{team_id}/messages", headers=_as(alice))
    assert [e["name"] for e in events.json()] == ["Kickoff"]
    assert [m["message"] for m in messages.json()] == ["hello"]


async def test_event_get_and_partial_update(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    team_id = await _create_team(client, alice)
    await client.post(f"/api/v1/teams/{team_id}/join", headers=_as(bob))
    created = await client.post(
        f"/api/v1/teams/{team_id}/events",
        json={"name": "Kickoff", "date": "2030-05-17T18:00:00Z", "location": "Lab 3"},
        headers=_as(alice),
    )
    event_url = f"/api/v1/teams/{team_id}/events/{created.json()['id']}"

    forbidden = await client.put(event_url, json={"name": "Mine now"}, headers=_as(bob))
    assert forbidden.status_code == 403
    updated = await client.put(event_url, json={"name": "Launch"}, headers=_as(alice))
    assert updated.status_code == 200
    assert (updated.json()["name"], updated.json()["location"]) == ("Launch", "Lab 3")

    fetched = await client.get(event_url, headers=_as(bob))
    assert fetched.json()["name"] == "Launch"
    missing = await client.get(
        f"/api/v1/teams/{team_id}/events/{uuid4()}", headers=_as(bob),
    )
    assert missing.status_code == 404


async def test_admin_user_and_chat_moderation(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    resp = await client.post(
        "/api/v1/users",
        json={"email": "root@example.com", "username": "root", "is_admin": True},
    )
    root = resp.json()["id"]
    team_id = await _create_team(client, alice)
    await client.post(
        f"/api/v1/teams/{team_id}/messages", json={"message": "spam"}, headers=_as(alice),
    )

    denied = await client.delete(f"/api/v1/admin/users/{bob}", headers=_as(alice))
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "NOT_AUTHORIZED"

    deleted = await client.delete(f"/api/v1/admin/users/{bob}", headers=_as(root))
    assert deleted.json() == {"success": True, "id": bob, "is_deleted": True}
    assert (await client.get(f"/api/v1/users/{bob}")).status_code == 404
    recovered = await client.put(f"/api/v1/admin/users/{bob}/recover", headers=_as(root))
    assert recovered.json()["is_deleted"] is False
    assert (await client.get(f"/api/v1/users/{bob}")).status_code == 200

    cleared = await client.delete(f"/api/v1/admin/teams/{team_id}/chat", headers=_as(root))
    assert cleared.json() == {"success": True, "removed": 1}
    history = await client.get(f"/api/v1/teams/{team_id}/messages", headers=_as(alice))
    assert history.json() == []


async def test_unknown_route_uses_error_envelope(client):
    resp = await client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "ROUTE_NOT_FOUND"
