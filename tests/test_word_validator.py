from datetime import datetime, timedelta

import pytest
from sqlalchemy import select, update

from config import SETTINGS
from models.db_models import WordCache
from models.game import DictionaryUnavailableError
from services.ai_validator import AIWordValidator, parse_ai_response
from services.word_cache import WordCacheStore, WordValidationResult
from services.word_validator import DictionaryApiValidator


def _stub_status(validator, statuses):
    """Replace the HTTP call with canned status codes; returns the call log."""
    calls = []

    async def fake_fetch(word, language):
        calls.append((word, language))
        status = statuses[word]
        if isinstance(status, Exception):
            raise status
        return status

    validator._fetch_status = fake_fetch
    return calls


async def test_api_validator_200_and_404(session_factory):
    validator = DictionaryApiValidator(session_factory, base_url="http://dict.test")
    _stub_status(validator, {"silk": 200, "owm": 404})

    assert await validator.is_recognized("silk", "en") is True
    assert await validator.is_recognized("owm", "en") is False


async def test_api_validator_caches_answers(session_factory):
    validator = DictionaryApiValidator(session_factory, base_url="http://dict.test")
    calls = _stub_status(validator, {"silk": 200})

    first = await validator.validate_word("Silk", "en")
    second = await validator.validate_word("silk", "en")

    assert first.is_valid and not first.from_cache
    assert second.is_valid and second.from_cache
    assert calls == [("silk", "en")]


@pytest.mark.parametrize("status", [500, 429])
async def test_api_validator_server_error_is_unavailable(session_factory, status):
    validator = DictionaryApiValidator(session_factory, base_url="http://dict.test")
    calls = _stub_status(validator, {"silk": status})

    with pytest.raises(DictionaryUnavailableError):
        await validator.validate_word("silk", "en")
    # failures are not cached, so the next call retries
    with pytest.raises(DictionaryUnavailableError):
        await validator.validate_word("silk", "en")
    assert len(calls) == 2


async def test_api_validator_transport_error_is_unavailable(session_factory):
    validator = DictionaryApiValidator(session_factory, base_url="http://dict.test")
    _stub_status(validator, {"silk": DictionaryUnavailableError("connection refused")})

    with pytest.raises(DictionaryUnavailableError):
        await validator.is_recognized("silk", "en")


async def test_cache_expires(session_factory):
    store = WordCacheStore(session_factory, expiry_days=30)
    await store.put("en", WordValidationResult(word="silk", is_valid=True))
    assert (await store.get("silk", "en")).is_valid is True

    async with session_factory() as db:
        await db.execute(
            update(WordCache).values(validated_at=datetime.utcnow() - timedelta(days=31))
        )
        await db.commit()

    assert await store.get("silk", "en") is None


async def test_cache_put_updates_existing_row(session_factory):
    store = WordCacheStore(session_factory)
    await store.put("en", WordValidationResult(word="silk", is_valid=False, reason="typo"))
    await store.put("en", WordValidationResult(word="silk", is_valid=True))

    async with session_factory() as db:
        rows = (await db.execute(select(WordCache))).scalars().all()
    assert len(rows) == 1
    assert rows[0].is_valid is True
    assert rows[0].reason is None


async def test_cache_is_per_language(session_factory):
    store = WordCacheStore(session_factory)
    await store.put("en", WordValidationResult(word="chat", is_valid=True))
    assert await store.get("chat", "fr") is None


@pytest.mark.parametrize("reply,expected,definite", [
    ('{"is_valid": true, "reason": "common noun"}', True, True),
    ('```json\n{"is_valid": false, "reason": "proper noun"}\n```', False, True),
    ('```\n{"is_valid": true}\n```', True, True),
    ('Sure! "is_valid": true because it is a word', True, False),
    ("I am not sure.", False, False),
    ("[1, 2, 3]", False, False),
    ('{"reason": "no verdict"}', False, False),
])
def test_parse_ai_response(reply, expected, definite):
    result = parse_ai_response("silk", reply)
    assert result.word == "silk"
    assert result.is_valid is expected
    assert result.definite is definite


async def test_ai_validator_does_not_cache_unclear_replies(session_factory, monkeypatch):
    monkeypatch.setattr(SETTINGS, "openai_api_key", "sk-test")
    validator = AIWordValidator(session_factory, provider="openai", model="test-model")
    replies = iter(["Sorry, I had a hiccup.", '{"is_valid": true, "reason": "a fabric"}'])

    async def fake_complete(prompt):
        return next(replies)

    validator._complete = fake_complete

    first = await validator.validate_word("silk", "en")
    assert first.is_valid is False and first.definite is False

    second = await validator.validate_word("silk", "en")
    assert second.is_valid is True and second.from_cache is False

    third = await validator.validate_word("silk", "en")
    assert third.is_valid is True and third.from_cache is True

    await validator.close()


async def test_ai_validator_provider_error_is_unavailable(session_factory, monkeypatch):
    monkeypatch.setattr(SETTINGS, "openai_api_key", "sk-test")
    validator = AIWordValidator(session_factory, provider="openai", model="test-model")

    async def failing_complete(prompt):
        raise RuntimeError("rate limited")

    validator._complete = failing_complete

    with pytest.raises(DictionaryUnavailableError):
        await validator.validate_word("silk", "en")
    assert await WordCacheStore(session_factory).get("silk", "en") is None

    await validator.close()
