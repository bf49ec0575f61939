"""
Word cache shared by the remote dictionary validators.
Stores definite answers so the same word is never looked up twice.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config import SETTINGS, LOGGER_NAME_DICTIONARY
from models.db_models import WordCache

logger = logging.getLogger(LOGGER_NAME_DICTIONARY)


@dataclass
class WordValidationResult:
    """Result of word validation."""
    word: str
    is_valid: bool
    reason: Optional[str] = None
    from_cache: bool = False

    # False when the source gave no clear answer; such results are not cached
    definite: bool = True


class WordCacheStore:
    """Reads and writes the word_cache table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        expiry_days: Optional[int] = None
    ):
        self._session_factory = session_factory
        self.expiry_days = expiry_days if expiry_days is not None else SETTINGS.word_cache_expiry_days

    async def get(self, word: str, language: str) -> Optional[WordValidationResult]:
        """Return the cached answer for a word, or None if missing or expired."""
        cache_expiry = datetime.utcnow() - timedelta(days=self.expiry_days)

        stmt = select(WordCache).where(
            WordCache.word == word,
            WordCache.language == language,
            WordCache.validated_at >= cache_expiry
        )

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            cached = result.scalar_one_or_none()

        if cached:
            return WordValidationResult(
                word=word,
                is_valid=cached.is_valid,
                reason=cached.reason,
                from_cache=True
            )

        return None

    async def put(self, language: str, result: WordValidationResult) -> None:
        """Store (or refresh) an answer."""
        async with self._session_factory() as session:
            stmt = select(WordCache).where(
                WordCache.word == result.word,
                WordCache.language == language
            )
            existing = await session.execute(stmt)
            cached = existing.scalar_one_or_none()

            if cached:
                cached.is_valid = result.is_valid
                cached.reason = result.reason
                cached.validated_at = datetime.utcnow()
            else:
                session.add(WordCache(
                    word=result.word,
                    language=language,
                    is_valid=result.is_valid,
                    reason=result.reason
                ))

            try:
                await session.commit()
            except Exception as e:
                logger.warning(f"Failed to cache word '{result.word}': {e}")
                await session.rollback()
