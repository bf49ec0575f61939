import random
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from database import create_session_factory, init_database
from models.game import DictionaryUnavailableError, GameSession
from services.game_manager import GameManager


class FakeOracle:
    """Recognizes a fixed set of words and remembers what it was asked."""

    def __init__(self, words=(), fail=False):
        self.words = set(words)
        self.fail = fail
        self.calls = []

    def is_recognized(self, word, language):
        self.calls.append((word, language))
        if self.fail:
            raise DictionaryUnavailableError("dictionary offline")
        return word in self.words


ENGLISH = {"silk", "worm", "milk", "ski", "owl", "row", "mow", "skim", "silkworm", "work", "slow"}


@pytest.fixture
def oracle():
    return FakeOracle(ENGLISH)


@pytest.fixture
def session(oracle):
    s = GameSession(oracle=oracle, word_source=lambda: ["silkworm"], rng=random.Random(7))
    s.start_or_restart()
    return s


@pytest.fixture
async def session_factory(tmp_path: Path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_database(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def manager(session_factory):
    return GameManager(
        session_factory=session_factory,
        oracle=FakeOracle(ENGLISH),
        word_source=lambda: ["silkworm"],
        rng=random.Random(0)
    )
