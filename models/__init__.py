"""Models for Word Scramble Bot - __init__ module."""
from models.db_models import (
    Base,
    ScrambleRound,
    FoundWord,
    WordCache,
    PlayerStats,
)
from models.game import (
    GameSession,
    SubmissionOutcome,
    OutcomeStatus,
    Rejection,
    RejectionKind,
    DictionaryOracle,
    DictionaryUnavailableError,
)

__all__ = [
    "Base",
    "ScrambleRound",
    "FoundWord",
    "WordCache",
    "PlayerStats",
    "GameSession",
    "SubmissionOutcome",
    "OutcomeStatus",
    "Rejection",
    "RejectionKind",
    "DictionaryOracle",
    "DictionaryUnavailableError",
]
