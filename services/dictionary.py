"""
Dictionary oracles for Word Scramble Bot.

GameSession asks a synchronous `is_recognized(word, language)`. This module
provides:

- WordListOracle: membership in a plain text word list
- LoopBridgeOracle: runs an async validator (Free Dictionary API, AI) on the
  bot's event loop and waits for the answer from a worker thread
- build_oracle(): picks the backend configured in SETTINGS
"""
import asyncio
import concurrent.futures
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config import SETTINGS, LOGGER_NAME_DICTIONARY, DEFAULT_LANGUAGE, DictionaryBackend
from models.game import DictionaryOracle, DictionaryUnavailableError

logger = logging.getLogger(LOGGER_NAME_DICTIONARY)

AsyncWordCheck = Callable[[str, str], Awaitable[bool]]


@dataclass(frozen=True)
class WordListOracle:
    """
    In-memory word lists keyed by language tag.

    File format: one word per line, any case.
    """
    words_by_language: Dict[str, Set[str]]

    @classmethod
    def from_file(cls, path: Path | str, language: str = DEFAULT_LANGUAGE) -> "WordListOracle":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Word list file not found: {p}")

        words: Set[str] = set()
        # utf-8 with errors ignored to be resilient to odd characters
        with p.open("r", encoding="utf-8", errors="ignore") as f:
            for line in f:
                w = line.strip().lower()
                if w:
                    words.add(w)

        logger.info(f"Loaded {len(words)} dictionary words ({language}) from {p}")
        return cls(words_by_language={language: words})

    def is_recognized(self, word: str, language: str) -> bool:
        words = self.words_by_language.get(language)
        if words is None:
            raise DictionaryUnavailableError(f"No word list loaded for language '{language}'")
        return word.lower() in words


class LoopBridgeOracle:
    """
    Synchronous facade over an async word check.

    Must be called from a thread other than the loop's own thread (the
    game manager runs submissions through asyncio.to_thread).
    """

    def __init__(
        self,
        check: AsyncWordCheck,
        loop: asyncio.AbstractEventLoop,
        timeout: Optional[float] = None
    ):
        self._check = check
        self._loop = loop
        self.timeout = timeout if timeout is not None else SETTINGS.dictionary_timeout_seconds
        self._loop_thread_id: Optional[int] = None
        if loop.is_running():
            self._loop_thread_id = threading.get_ident()

    def is_recognized(self, word: str, language: str) -> bool:
        if threading.get_ident() == self._loop_thread_id:
            raise RuntimeError("LoopBridgeOracle called from the event loop thread")

        future = asyncio.run_coroutine_threadsafe(self._check(word, language), self._loop)
        try:
            return future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError as e:
            future.cancel()
            raise DictionaryUnavailableError(
                f"Dictionary lookup for '{word}' timed out after {self.timeout}s"
            ) from e


class OracleHandle:
    """An oracle plus whatever needs closing when the bot shuts down."""

    def __init__(self, oracle: DictionaryOracle, validator=None):
        self.oracle = oracle
        self._validator = validator

    async def close(self) -> None:
        if self._validator is not None:
            await self._validator.close()


def build_oracle(
    session_factory: async_sessionmaker[AsyncSession],
    backend: Optional[str] = None
) -> OracleHandle:
    """
    Create the configured dictionary oracle.

    Must be called from a coroutine: remote backends are bridged onto the
    running loop.
    """
    backend = (backend or SETTINGS.dictionary_backend).lower()

    if backend == DictionaryBackend.WORDLIST:
        if SETTINGS.dictionary_path is None:
            raise ValueError("DICTIONARY_PATH must be set for the wordlist backend")
        return OracleHandle(WordListOracle.from_file(SETTINGS.dictionary_path))

    loop = asyncio.get_running_loop()

    if backend == DictionaryBackend.API:
        from services.word_validator import DictionaryApiValidator
        validator = DictionaryApiValidator(session_factory)
    elif backend == DictionaryBackend.AI:
        from services.ai_validator import AIWordValidator
        validator = AIWordValidator(session_factory)
    else:
        raise ValueError(f"Unknown dictionary backend: {backend}")

    logger.info(f"Using '{backend}' dictionary backend")
    return OracleHandle(LoopBridgeOracle(validator.is_recognized, loop), validator)
