"""
Configuration settings for the Word Scramble Discord Bot.
Loads environment variables and defines constants.
"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Discord Bot Token
    discord_token: Optional[str] = Field(default=None, validation_alias="DISCORD_TOKEN")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///word_scramble_bot.db",
        validation_alias="DATABASE_URL"
    )

    # Root words (one lowercase word per line)
    start_words_path: Path = Field(
        default=DATA_DIR / "start.txt",
        validation_alias="START_WORDS_PATH"
    )

    # Dictionary backend: "api", "ai" or "wordlist"
    dictionary_backend: str = Field(default="api", validation_alias="DICTIONARY_BACKEND")
    dictionary_api_url: str = Field(
        default="https://api.dictionaryapi.dev/api/v2/entries",
        validation_alias="DICTIONARY_API_URL"
    )
    dictionary_path: Optional[Path] = Field(default=None, validation_alias="DICTIONARY_PATH")
    dictionary_timeout_seconds: float = Field(default=10.0, validation_alias="DICTIONARY_TIMEOUT_SECONDS")

    # AI Provider Settings (used by the "ai" dictionary backend)
    ai_provider: str = Field(default="openai", validation_alias="AI_PROVIDER")  # "openai" or "anthropic"
    openai_api_key: Optional[str] = Field(default=None, validation_alias="OPENAI_API_KEY")
    anthropic_api_key: Optional[str] = Field(default=None, validation_alias="ANTHROPIC_API_KEY")
    ai_model: str = Field(default="gpt-4o-mini", validation_alias="AI_MODEL")

    # Cache settings
    word_cache_expiry_days: int = Field(default=30, validation_alias="WORD_CACHE_EXPIRY_DAYS")

    # How many accepted words /scramble words shows
    max_listed_words: int = Field(default=20, validation_alias="MAX_LISTED_WORDS")

    # Development mode
    dev_mode: bool = Field(default=False, validation_alias="DEV_MODE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


# Global settings instance
SETTINGS = Settings()

# Dictionary backends
class DictionaryBackend:
    API = "api"
    AI = "ai"
    WORDLIST = "wordlist"

# Game rules
MIN_WORD_LENGTH = 3
FALLBACK_ROOT_WORD = "silkworm"

# Logger names
LOGGER_NAME_MAIN = "__main__"
LOGGER_NAME_GAME = "__game__"
LOGGER_NAME_DICTIONARY = "__dictionary__"
LOGGER_NAME_DB = "__database__"

# Supported Languages
SUPPORTED_LANGUAGES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
}

DEFAULT_LANGUAGE = "en"
