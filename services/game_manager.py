"""
Game Manager Service for Word Scramble Bot.
Handles round lifecycle, per-channel state and database persistence.
"""
import asyncio
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config import LOGGER_NAME_GAME
from database import async_session_factory
from models.db_models import ScrambleRound, FoundWord, PlayerStats
from models.game import DictionaryOracle, GameSession, SubmissionOutcome
from services.dictionary import OracleHandle, build_oracle
from services.word_source import load_candidate_root_words

logger = logging.getLogger(LOGGER_NAME_GAME)


@dataclass
class ChannelRound:
    """A GameSession hosted in a Discord channel."""
    round_id: int
    guild_id: int
    channel_id: int
    host_id: int
    session: GameSession

    # Players who submitted at least one word: user_id -> accepted count
    contributors: Dict[int, int] = field(default_factory=dict)

    @property
    def root_word(self) -> str:
        return self.session.root_word

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def used_words(self) -> list:
        return self.session.used_words


class GameManager:
    """
    Manages all running rounds and their state.

    One round per channel. Submissions in a channel are serialized by a
    per-channel lock and evaluated in a worker thread, so a slow dictionary
    never blocks the event loop.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        oracle: Optional[DictionaryOracle] = None,
        word_source: Callable[[], Sequence[str]] = load_candidate_root_words,
        rng: Optional[random.Random] = None
    ):
        self._session_factory = session_factory
        self._oracle = oracle
        self._oracle_handle: Optional[OracleHandle] = None
        self._word_source = word_source
        self._rng = rng or random.Random()

        # Running rounds: channel_id -> ChannelRound
        self._rounds: Dict[int, ChannelRound] = {}
        self._locks: Dict[int, asyncio.Lock] = {}

    def get_round(self, channel_id: int) -> Optional[ChannelRound]:
        """Get the running round in a channel."""
        return self._rounds.get(channel_id)

    def has_active_round(self, channel_id: int) -> bool:
        return channel_id in self._rounds

    def _lock_for(self, channel_id: int) -> asyncio.Lock:
        lock = self._locks.get(channel_id)
        if lock is None:
            lock = self._locks[channel_id] = asyncio.Lock()
        return lock

    def _get_oracle(self) -> DictionaryOracle:
        if self._oracle is None:
            self._oracle_handle = build_oracle(self._session_factory)
            self._oracle = self._oracle_handle.oracle
        return self._oracle

    async def start_or_restart(
        self,
        guild_id: int,
        channel_id: int,
        host_id: int,
        replacing: Optional[int] = None
    ) -> Optional[ChannelRound]:
        """
        Start a round in a channel. A round already running there is
        finished first and replaced.

        Args:
            replacing: Only restart if the running round has this round_id

        Returns:
            The new round, None if `replacing` no longer matches
        """
        async with self._lock_for(channel_id):
            if replacing is not None and not self._is_running(channel_id, replacing):
                logger.info(f"Ignored restart of finished round {replacing} in channel {channel_id}")
                return None

            previous = self._rounds.pop(channel_id, None)
            if previous:
                await self._finish(previous)

            session = GameSession(
                oracle=self._get_oracle(),
                word_source=self._word_source,
                rng=self._rng
            )
            session.start_or_restart()

            async with self._session_factory() as db:
                record = ScrambleRound(
                    guild_id=guild_id,
                    channel_id=channel_id,
                    host_id=host_id,
                    root_word=session.root_word,
                    started_at=session.started_at
                )
                db.add(record)
                await db.commit()
                await db.refresh(record)

            channel_round = ChannelRound(
                round_id=record.round_id,
                guild_id=guild_id,
                channel_id=channel_id,
                host_id=host_id,
                session=session
            )
            self._rounds[channel_id] = channel_round

            logger.info(
                f"Round started: round_id={record.round_id}, channel={channel_id}, "
                f"host={host_id}, root='{session.root_word}'"
            )
            return channel_round

    async def submit(
        self,
        channel_id: int,
        user_id: int,
        text: str
    ) -> Optional[SubmissionOutcome]:
        """
        Submit a word in a channel.

        Returns:
            The outcome, or None if no round is running in the channel.
        """
        async with self._lock_for(channel_id):
            channel_round = self._rounds.get(channel_id)
            if not channel_round:
                return None

            outcome = await asyncio.to_thread(channel_round.session.submit, text)

            # The session already holds the outcome; a failed write only loses stats
            try:
                if outcome.is_accepted:
                    await self._record_word(channel_round, outcome.word, user_id)
                elif outcome.is_rejected:
                    await self._record_rejection(channel_round, user_id)
                    logger.debug(
                        f"Rejected '{outcome.word}' ({outcome.rejection.kind.value}) "
                        f"in round {channel_round.round_id}"
                    )
            except SQLAlchemyError as e:
                logger.error(
                    f"Failed to record '{outcome.word}' in round {channel_round.round_id}: {e}",
                    exc_info=True
                )

            return outcome

    async def end_round(
        self,
        channel_id: int,
        round_id: Optional[int] = None
    ) -> Optional[ChannelRound]:
        """
        Stop the round in a channel.

        Args:
            round_id: Only stop if the running round has this round_id

        Returns:
            The finished round, None if none was running
        """
        async with self._lock_for(channel_id):
            if round_id is not None and not self._is_running(channel_id, round_id):
                return None
            channel_round = self._rounds.pop(channel_id, None)
            if not channel_round:
                return None
            await self._finish(channel_round)
            return channel_round

    def _is_running(self, channel_id: int, round_id: int) -> bool:
        current = self._rounds.get(channel_id)
        return current is not None and current.round_id == round_id

    async def close(self) -> None:
        """Finish every running round and release the dictionary backend."""
        for channel_id in list(self._rounds):
            await self.end_round(channel_id)
        if self._oracle_handle is not None:
            await self._oracle_handle.close()

    async def _finish(self, channel_round: ChannelRound) -> None:
        async with self._session_factory() as db:
            await db.execute(
                update(ScrambleRound)
                .where(ScrambleRound.round_id == channel_round.round_id)
                .values(score=channel_round.score, finished_at=datetime.utcnow())
            )
            for user_id in channel_round.contributors:
                stats = await self._get_or_create_stats(db, user_id, channel_round.guild_id)
                stats.rounds_played += 1
            await db.commit()

        logger.info(
            f"Round finished: round_id={channel_round.round_id}, score={channel_round.score}"
        )

    async def _record_word(self, channel_round: ChannelRound, word: str, user_id: int) -> None:
        channel_round.contributors[user_id] = channel_round.contributors.get(user_id, 0) + 1

        async with self._session_factory() as db:
            db.add(FoundWord(round_id=channel_round.round_id, word=word, user_id=user_id))
            await db.execute(
                update(ScrambleRound)
                .where(ScrambleRound.round_id == channel_round.round_id)
                .values(score=channel_round.score)
            )

            stats = await self._get_or_create_stats(db, user_id, channel_round.guild_id)
            stats.words_found += 1
            if not stats.longest_word or len(word) > len(stats.longest_word):
                stats.longest_word = word

            await db.commit()

        logger.debug(f"Word recorded: '{word}' by user={user_id}, round={channel_round.round_id}")

    async def _record_rejection(self, channel_round: ChannelRound, user_id: int) -> None:
        channel_round.contributors.setdefault(user_id, 0)

        async with self._session_factory() as db:
            stats = await self._get_or_create_stats(db, user_id, channel_round.guild_id)
            stats.rejected_attempts += 1
            await db.commit()

    async def _get_or_create_stats(
        self,
        db: AsyncSession,
        user_id: int,
        guild_id: int
    ) -> PlayerStats:
        stmt = select(PlayerStats).where(
            PlayerStats.user_id == user_id,
            PlayerStats.guild_id == guild_id
        )
        result = await db.execute(stmt)
        stats = result.scalar_one_or_none()

        if not stats:
            stats = PlayerStats(
                user_id=user_id,
                guild_id=guild_id,
                rounds_played=0,
                words_found=0,
                rejected_attempts=0
            )
            db.add(stats)
        return stats


# Global game manager instance
game_manager = GameManager()
