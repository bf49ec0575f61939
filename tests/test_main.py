from config import DictionaryBackend, SETTINGS, Settings
from main import check_configuration


def test_settings_load_without_token(monkeypatch):
    monkeypatch.delenv("DISCORD_TOKEN", raising=False)
    settings = Settings(_env_file=None)
    assert settings.discord_token is None


def test_missing_token_is_reported(monkeypatch):
    monkeypatch.setattr(SETTINGS, "discord_token", None)
    monkeypatch.setattr(SETTINGS, "dictionary_backend", DictionaryBackend.API)

    assert check_configuration() == ["DISCORD_TOKEN not set! Please set it in .env file."]


def test_complete_configuration_has_no_problems(monkeypatch):
    monkeypatch.setattr(SETTINGS, "discord_token", "token")
    monkeypatch.setattr(SETTINGS, "dictionary_backend", DictionaryBackend.API)

    assert check_configuration() == []


def test_backend_requirements_are_checked(monkeypatch):
    monkeypatch.setattr(SETTINGS, "discord_token", "token")
    monkeypatch.setattr(SETTINGS, "dictionary_backend", DictionaryBackend.WORDLIST)
    monkeypatch.setattr(SETTINGS, "dictionary_path", None)
    assert check_configuration() == [
        "DICTIONARY_PATH not set! The wordlist backend needs a word list file."
    ]

    monkeypatch.setattr(SETTINGS, "dictionary_backend", "thesaurus")
    assert check_configuration() == ["Unknown DICTIONARY_BACKEND: thesaurus"]
