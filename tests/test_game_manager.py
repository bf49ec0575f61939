import asyncio

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models.db_models import FoundWord, PlayerStats, ScrambleRound
from models.game import RejectionKind

GUILD = 1
CHANNEL = 10
HOST = 100
PLAYER = 200


async def _stats(session_factory, user_id):
    async with session_factory() as db:
        result = await db.execute(select(PlayerStats).where(PlayerStats.user_id == user_id))
        return result.scalar_one_or_none()


async def test_start_creates_round(manager, session_factory):
    channel_round = await manager.start_or_restart(GUILD, CHANNEL, HOST)

    assert manager.has_active_round(CHANNEL)
    assert channel_round.root_word == "silkworm"
    assert channel_round.score == 0

    async with session_factory() as db:
        record = await db.get(ScrambleRound, channel_round.round_id)
    assert record.root_word == "silkworm"
    assert record.finished_at is None


async def test_submit_without_round_returns_none(manager):
    assert await manager.submit(CHANNEL, PLAYER, "silk") is None


async def test_accepted_word_is_persisted(manager, session_factory):
    channel_round = await manager.start_or_restart(GUILD, CHANNEL, HOST)

    outcome = await manager.submit(CHANNEL, PLAYER, "Silk")
    assert outcome.is_accepted
    assert outcome.score == 1

    async with session_factory() as db:
        words = (await db.execute(select(FoundWord))).scalars().all()
        record = await db.get(ScrambleRound, channel_round.round_id)
    assert [(w.word, w.user_id) for w in words] == [("silk", PLAYER)]
    assert record.score == 1

    stats = await _stats(session_factory, PLAYER)
    assert stats.words_found == 1
    assert stats.longest_word == "silk"
    assert stats.rejected_attempts == 0


async def test_rejection_counts_attempt(manager, session_factory):
    await manager.start_or_restart(GUILD, CHANNEL, HOST)

    outcome = await manager.submit(CHANNEL, PLAYER, "silkworm")
    assert outcome.rejection.kind == RejectionKind.SAME_AS_ROOT

    stats = await _stats(session_factory, PLAYER)
    assert stats.rejected_attempts == 1
    assert stats.words_found == 0


async def test_blank_submission_records_nothing(manager, session_factory):
    await manager.start_or_restart(GUILD, CHANNEL, HOST)
    outcome = await manager.submit(CHANNEL, PLAYER, "   ")
    assert outcome.is_ignored
    assert await _stats(session_factory, PLAYER) is None


async def test_longest_word_keeps_the_longest(manager, session_factory):
    await manager.start_or_restart(GUILD, CHANNEL, HOST)
    for word in ["skim", "owl", "silk"]:
        await manager.submit(CHANNEL, PLAYER, word)

    stats = await _stats(session_factory, PLAYER)
    assert stats.words_found == 3
    assert stats.longest_word == "skim"


async def test_concurrent_submissions_are_serialized(manager):
    channel_round = await manager.start_or_restart(GUILD, CHANNEL, HOST)

    words = ["silk", "silk", "worm", "milk", "worm", "owl", "silk", "mow"]
    outcomes = await asyncio.gather(
        *(manager.submit(CHANNEL, PLAYER + i, w) for i, w in enumerate(words))
    )

    accepted = [o.word for o in outcomes if o.is_accepted]
    assert sorted(accepted) == ["milk", "mow", "owl", "silk", "worm"]
    assert channel_round.score == len(channel_round.used_words) == 5


async def test_restart_finishes_previous_round(manager, session_factory):
    first = await manager.start_or_restart(GUILD, CHANNEL, HOST)
    await manager.submit(CHANNEL, PLAYER, "silk")

    second = await manager.start_or_restart(GUILD, CHANNEL, HOST)
    assert second.round_id != first.round_id
    assert second.score == 0
    assert second.used_words == []

    async with session_factory() as db:
        old = await db.get(ScrambleRound, first.round_id)
    assert old.finished_at is not None
    assert old.score == 1

    stats = await _stats(session_factory, PLAYER)
    assert stats.rounds_played == 1


async def test_end_round(manager, session_factory):
    await manager.start_or_restart(GUILD, CHANNEL, HOST)
    await manager.submit(CHANNEL, PLAYER, "silk")
    await manager.submit(CHANNEL, HOST, "zzz")

    finished = await manager.end_round(CHANNEL)
    assert finished.score == 1
    assert finished.contributors == {PLAYER: 1, HOST: 0}
    assert not manager.has_active_round(CHANNEL)
    assert await manager.end_round(CHANNEL) is None

    assert (await _stats(session_factory, PLAYER)).rounds_played == 1
    assert (await _stats(session_factory, HOST)).rounds_played == 1


async def test_channels_are_independent(manager):
    await manager.start_or_restart(GUILD, CHANNEL, HOST)
    await manager.start_or_restart(GUILD, CHANNEL + 1, HOST)

    await manager.submit(CHANNEL, PLAYER, "silk")
    outcome = await manager.submit(CHANNEL + 1, PLAYER, "silk")

    assert outcome.is_accepted
    assert manager.get_round(CHANNEL).score == 1
    assert manager.get_round(CHANNEL + 1).score == 1


async def test_close_finishes_all_rounds(manager):
    await manager.start_or_restart(GUILD, CHANNEL, HOST)
    await manager.start_or_restart(GUILD, CHANNEL + 1, HOST)
    await manager.close()
    assert not manager.has_active_round(CHANNEL)
    assert not manager.has_active_round(CHANNEL + 1)


async def test_end_round_only_stops_the_given_round(manager):
    first = await manager.start_or_restart(GUILD, CHANNEL, HOST)
    await manager.end_round(CHANNEL)
    second = await manager.start_or_restart(GUILD, CHANNEL, PLAYER)

    assert await manager.end_round(CHANNEL, round_id=first.round_id) is None
    assert manager.get_round(CHANNEL) is second

    finished = await manager.end_round(CHANNEL, round_id=second.round_id)
    assert finished is second
    assert not manager.has_active_round(CHANNEL)


async def test_restart_only_replaces_the_given_round(manager):
    first = await manager.start_or_restart(GUILD, CHANNEL, HOST)
    await manager.end_round(CHANNEL)

    # nothing running: an old round cannot be restarted
    assert await manager.start_or_restart(GUILD, CHANNEL, HOST, replacing=first.round_id) is None
    assert not manager.has_active_round(CHANNEL)

    second = await manager.start_or_restart(GUILD, CHANNEL, PLAYER)
    assert await manager.start_or_restart(GUILD, CHANNEL, HOST, replacing=first.round_id) is None
    assert manager.get_round(CHANNEL) is second

    third = await manager.start_or_restart(GUILD, CHANNEL, PLAYER, replacing=second.round_id)
    assert third.round_id != second.round_id
    assert manager.get_round(CHANNEL) is third


async def test_failed_write_still_returns_outcome(manager, caplog):
    await manager.start_or_restart(GUILD, CHANNEL, HOST)

    async def broken_write(*args):
        raise SQLAlchemyError("database is locked")

    manager._record_word = broken_write
    manager._record_rejection = broken_write

    accepted = await manager.submit(CHANNEL, PLAYER, "silk")
    rejected = await manager.submit(CHANNEL, PLAYER, "zzz")

    assert accepted.is_accepted and accepted.score == 1
    assert rejected.is_rejected
    assert manager.get_round(CHANNEL).used_words == ["silk"]
    assert "Failed to record 'silk'" in caplog.text
