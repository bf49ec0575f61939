"""
AI dictionary for Word Scramble Bot.
Asks OpenAI or Anthropic whether a word exists; answers are cached.
"""
import json
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config import SETTINGS, LOGGER_NAME_DICTIONARY, DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES
from models.game import DictionaryUnavailableError
from services.word_cache import WordCacheStore, WordValidationResult

logger = logging.getLogger(LOGGER_NAME_DICTIONARY)

SYSTEM_PROMPT = "You are a dictionary. Reply with a single JSON object and nothing else."

PROMPT_TEMPLATE = """Is "{word}" a real {language_name} word that could appear in a word scramble game?

Count standard dictionary words, including plurals and inflected forms.
Do not count proper nouns (people, places, brands) or abbreviations.

Reply as: {{"is_valid": true or false, "reason": "short explanation"}}"""

MAX_REPLY_TOKENS = 200


class AIWordValidator:
    """
    Word check backed by a chat model.
    The provider is chosen with SETTINGS.ai_provider ("openai" or "anthropic").
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        provider: Optional[str] = None,
        model: Optional[str] = None
    ):
        self.provider = (provider or SETTINGS.ai_provider).lower()
        self.model = model or SETTINGS.ai_model
        self._cache = WordCacheStore(session_factory)

        if self.provider == "openai":
            from openai import AsyncOpenAI
            self._client = AsyncOpenAI(api_key=SETTINGS.openai_api_key)
            self._complete = self._complete_openai
        elif self.provider == "anthropic":
            from anthropic import AsyncAnthropic
            self._client = AsyncAnthropic(api_key=SETTINGS.anthropic_api_key)
            self._complete = self._complete_anthropic
        else:
            raise ValueError(f"Unknown AI provider: {self.provider}")

        logger.info(f"AI dictionary using {self.provider} model {self.model}")

    async def close(self):
        await self._client.close()

    async def is_recognized(self, word: str, language: str = DEFAULT_LANGUAGE) -> bool:
        result = await self.validate_word(word, language)
        return result.is_valid

    async def validate_word(
        self,
        word: str,
        language: str = DEFAULT_LANGUAGE
    ) -> WordValidationResult:
        """
        Cached lookup, falling back to the model.

        Raises:
            DictionaryUnavailableError: the provider call failed.
        """
        word = word.lower().strip()

        cached = await self._cache.get(word, language)
        if cached:
            logger.debug(f"Cache hit for word: {word}")
            return cached

        prompt = PROMPT_TEMPLATE.format(
            word=word,
            language_name=SUPPORTED_LANGUAGES.get(language, "English")
        )
        logger.info(f"Asking {self.provider} about: {word}")
        try:
            reply = await self._complete(prompt)
        except Exception as e:
            logger.error(f"AI validation error for '{word}': {e}")
            raise DictionaryUnavailableError(f"AI provider error: {e}") from e

        result = parse_ai_response(word, reply)
        if result.definite:
            await self._cache.put(language, result)
        else:
            logger.warning(f"Not caching unclear answer for '{word}'")
        return result

    async def _complete_openai(self, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.1,
            max_tokens=MAX_REPLY_TOKENS
        )
        return response.choices[0].message.content or ""

    async def _complete_anthropic(self, prompt: str) -> str:
        response = await self._client.messages.create(
            model=self.model,
            system=SYSTEM_PROMPT,
            max_tokens=MAX_REPLY_TOKENS,
            messages=[{"role": "user", "content": prompt}]
        )
        return response.content[0].text


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    for prefix in ("```json", "```"):
        if text.startswith(prefix):
            text = text[len(prefix):]
            break
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_ai_response(word: str, response_text: str) -> WordValidationResult:
    """
    Turn a model reply into a WordValidationResult.

    Replies that are not a JSON object are scanned for `"is_valid": true`;
    anything else counts as not a word. Either way the result is marked
    not definite, so it is never cached.
    """
    try:
        data = json.loads(_strip_code_fence(response_text))
    except json.JSONDecodeError:
        logger.warning(f"Failed to parse AI response: {response_text}")
        lowered = response_text.lower().replace(" ", "")
        return WordValidationResult(
            word=word,
            is_valid='"is_valid":true' in lowered,
            reason=f"Unparsed reply: {response_text[:100]}",
            definite=False
        )

    if not isinstance(data, dict):
        return WordValidationResult(
            word=word, is_valid=False, reason="Unexpected reply shape", definite=False
        )

    verdict = data.get("is_valid")
    return WordValidationResult(
        word=word,
        is_valid=verdict is True,
        reason=data.get("reason"),
        definite=isinstance(verdict, bool)
    )
