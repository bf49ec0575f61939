"""
Word Validator Service using Free Dictionary API.
Free dictionary API - no API key required.
https://dictionaryapi.dev/
"""
import asyncio
import logging
from typing import Optional

import aiohttp
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config import SETTINGS, LOGGER_NAME_DICTIONARY, DEFAULT_LANGUAGE
from models.game import DictionaryUnavailableError
from services.word_cache import WordCacheStore, WordValidationResult

logger = logging.getLogger(LOGGER_NAME_DICTIONARY)


class DictionaryApiValidator:
    """
    Validates words using the Free Dictionary API.
    Includes caching to reduce API calls.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None
    ):
        self.base_url = (base_url or SETTINGS.dictionary_api_url).rstrip("/")
        self.timeout_seconds = timeout_seconds or SETTINGS.dictionary_timeout_seconds
        self._cache = WordCacheStore(session_factory)
        self._session: Optional[aiohttp.ClientSession] = None
        logger.info(f"Word validator initialized using Free Dictionary API ({self.base_url})")

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)
            )
        return self._session

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def is_recognized(self, word: str, language: str = DEFAULT_LANGUAGE) -> bool:
        result = await self.validate_word(word, language)
        return result.is_valid

    async def validate_word(
        self,
        word: str,
        language: str = DEFAULT_LANGUAGE
    ) -> WordValidationResult:
        """
        Validate a word using the Free Dictionary API with caching.

        Raises:
            DictionaryUnavailableError: the API could not be reached or
                answered with something other than 200/404.
        """
        word_lower = word.lower().strip()

        cached_result = await self._cache.get(word_lower, language)
        if cached_result:
            logger.debug(f"Cache hit for word: {word_lower}")
            return cached_result

        logger.info(f"Validating word with Dictionary API: {word_lower}")
        status = await self._fetch_status(word_lower, language)

        if status == 200:
            result = WordValidationResult(word=word_lower, is_valid=True)
        elif status == 404:
            result = WordValidationResult(
                word=word_lower,
                is_valid=False,
                reason=f"The word '{word_lower}' is not found in standard dictionaries."
            )
        else:
            logger.warning(f"Dictionary API returned status {status} for word '{word_lower}'")
            raise DictionaryUnavailableError(f"Dictionary API error {status}")

        await self._cache.put(language, result)
        return result

    async def _fetch_status(self, word: str, language: str) -> int:
        """Look a word up and return the HTTP status code."""
        url = f"{self.base_url}/{language}/{word}"
        try:
            http_session = await self._get_session()
            async with http_session.get(url) as response:
                return response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Dictionary API connection error for '{word}': {e}")
            raise DictionaryUnavailableError("Could not connect to dictionary service") from e
