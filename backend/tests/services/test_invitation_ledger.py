"""Invitation Ledger — pending uniqueness, conditional respond, history."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from teambuilder.core.domain_types import InvitationStatus
from teambuilder.core.errors import (
    AlreadyInvitedError, AlreadyRespondedError, ResourceNotFoundError,
)
from teambuilder.models.invitation import Invitation
from teambuilder.services.invitation_ledger import InvitationLedger


@pytest.fixture
def ledger(test_db):
    return InvitationLedger(test_db)


async def test_create_records_pending_invitation(ledger, test_db, make_team, alice, bob):
    team_id = await make_team(alice)
    invitation = await ledger.create(team_id, bob, alice)
    await test_db.commit()

    assert invitation.status == InvitationStatus.PENDING
    assert invitation.responded_at is None
    assert (await ledger.get(invitation.id)).invited_by_id == alice


async def test_second_pending_invitation_carries_existing_id(
    ledger, test_db, make_team, alice, bob,
):
    team_id = await make_team(alice, name="Chess Club")
    first = await ledger.create(team_id, bob, alice)
    first_id = first.id
    await test_db.commit()

    with pytest.raises(AlreadyInvitedError) as exc:
        await ledger.create(team_id, bob, alice)
    assert exc.value.existing_invitation_id == first_id
    assert "Chess Club" in exc.value.message


async def test_partial_index_rejects_duplicate_pending_rows(test_db, make_team, alice, bob):
    team_id = await make_team(alice)
    for _ in range(2):
        test_db.add(Invitation(team_id=team_id, invited_user_id=bob, invited_by_id=alice))
    with pytest.raises(IntegrityError):
        await test_db.flush()
    await test_db.rollback()


async def test_responded_invitation_does_not_block_a_new_one(
    ledger, test_db, make_team, alice, bob,
):
    team_id = await make_team(alice)
    first = await ledger.create(team_id, bob, alice)
    await ledger.respond(first.id, accept=False)
    second = await ledger.create(team_id, bob, alice)
    await test_db.commit()

    assert second.id != first.id
    assert len(await ledger.list_for_team(team_id)) == 2


async def test_respond_sets_terminal_state(ledger, test_db, make_team, alice, bob):
    team_id = await make_team(alice)
    invitation = await ledger.create(team_id, bob, alice)
    responded = await ledger.respond(invitation.id, accept=True)
    await test_db.commit()

    assert responded.responded_at is not None
    assert responded.accepted is True
    assert responded.status == InvitationStatus.ACCEPTED


async def test_double_respond_rejected(ledger, test_db, make_team, alice, bob):
    team_id = await make_team(alice)
    invitation = await ledger.create(team_id, bob, alice)
    await ledger.respond(invitation.id, accept=False)
    await test_db.commit()

    with pytest.raises(AlreadyRespondedError):
        await ledger.respond(invitation.id, accept=True)
    assert (await ledger.get(invitation.id)).accepted is False


async def test_respond_unknown_invitation_raises_not_found(ledger):
    with pytest.raises(ResourceNotFoundError):
        await ledger.respond(uuid4(), accept=True)


async def test_pending_listing_excludes_answered(ledger, test_db, make_team, alice, bob):
    answered_team = await make_team(alice, name="Answered")
    open_team = await make_team(alice, name="Open")
    answered = await ledger.create(answered_team, bob, alice)
    await ledger.respond(answered.id, accept=False)
    pending = await ledger.create(open_team, bob, alice)
    await test_db.commit()

    assert [i.id for i in await ledger.list_pending_for_user(bob)] == [pending.id]


async def test_listing_newest_first(ledger, test_db, make_team, alice, bob, carol):
    team_id = await make_team(alice)
    older = await ledger.create(team_id, bob, alice)
    older.sent_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    newer = await ledger.create(team_id, carol, alice)
    await test_db.commit()

    assert [i.id for i in await ledger.list_for_team(team_id)] == [newer.id, older.id]


async def test_delete_is_idempotent(ledger, test_db, make_team, alice, bob):
    team_id = await make_team(alice)
    invitation = await ledger.create(team_id, bob, alice)
    await test_db.commit()

    assert await ledger.delete(invitation.id) is True
    assert await ledger.delete(invitation.id) is False


async def test_delete_all_for_team_returns_count(ledger, make_team, alice, bob, carol):
    team_id = await make_team(alice)
    await ledger.create(team_id, bob, alice)
    await ledger.create(team_id, carol, alice)
    assert await ledger.delete_all_for_team(team_id) == 2


async def test_create_losing_insert_race_reports_winner(
    ledger, test_db, monkeypatch, make_team, alice, bob,
):
    team_id = await make_team(alice, name="Chess Club")
    winner_id = (await ledger.create(team_id, bob, alice)).id
    await test_db.commit()

    real_find_pending = ledger.find_pending
    lookups = []

    async def stale_find_pending(t_id, u_id):
        # first lookup misses the committed row, as a concurrent writer would
        lookups.append(u_id)
        if len(lookups) == 1:
            return None
        return await real_find_pending(t_id, u_id)

    monkeypatch.setattr(ledger, "find_pending", stale_find_pending)

    with pytest.raises(AlreadyInvitedError) as exc:
        await ledger.create(team_id, bob, alice)
    assert len(lookups) == 2
    assert exc.value.existing_invitation_id == winner_id
    assert "Chess Club" in exc.value.message
    assert len(await ledger.list_for_team(team_id)) == 1
