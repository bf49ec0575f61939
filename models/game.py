"""
Game state for Word Scramble Bot.

A GameSession holds one root word, the words accepted so far and the score,
and validates every submission through a fixed rule chain:

    1. at least MIN_WORD_LENGTH letters
    2. not the root word itself
    3. not already accepted
    4. spellable from the root word's letters
    5. recognized by the dictionary oracle

The session knows nothing about Discord or the database; GameManager hosts
one per channel.
"""
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from config import (
    DEFAULT_LANGUAGE,
    FALLBACK_ROOT_WORD,
    LOGGER_NAME_GAME,
    MIN_WORD_LENGTH,
)

logger = logging.getLogger(LOGGER_NAME_GAME)


class DictionaryUnavailableError(Exception):
    """Raised by an oracle that cannot give an answer (network, timeout, missing list)."""


class DictionaryOracle(Protocol):
    """Anything that can tell whether a word exists in a language."""

    def is_recognized(self, word: str, language: str) -> bool:
        ...


class RejectionKind(str, Enum):
    TOO_SHORT = "too_short"
    SAME_AS_ROOT = "same_as_root"
    ALREADY_USED = "already_used"
    NOT_POSSIBLE = "not_possible"
    NOT_REAL = "not_real"


# Title and message shown to the player for each rejection
REJECTION_TEXT = {
    RejectionKind.TOO_SHORT: ("Word too short", "Word must be more thant 3 characters."),
    RejectionKind.SAME_AS_ROOT: ("Answer Cannot Be Same", "Answer cannot be same as root word."),
    RejectionKind.ALREADY_USED: ("Word Used Already", "Be more original!"),
    RejectionKind.NOT_POSSIBLE: ("Word Not Possible", "You can't spell that word from {root_word}."),
    RejectionKind.NOT_REAL: ("Word Not Recognized", "That isn't a real word."),
}


@dataclass(frozen=True)
class Rejection:
    """Why a submission was refused."""
    kind: RejectionKind
    root_word: str

    @property
    def title(self) -> str:
        return REJECTION_TEXT[self.kind][0]

    @property
    def message(self) -> str:
        return REJECTION_TEXT[self.kind][1].format(root_word=self.root_word)


class OutcomeStatus(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    IGNORED = "ignored"


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of GameSession.submit()."""
    status: OutcomeStatus
    word: str = ""
    score: int = 0
    rejection: Optional[Rejection] = None

    @property
    def is_accepted(self) -> bool:
        return self.status == OutcomeStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == OutcomeStatus.REJECTED

    @property
    def is_ignored(self) -> bool:
        return self.status == OutcomeStatus.IGNORED


def normalize_word(raw: str) -> str:
    """Lowercase and strip surrounding whitespace, newlines included."""
    return raw.lower().strip()


def can_spell_from(word: str, root_word: str) -> bool:
    """
    Check that every letter of `word` can be taken from `root_word`,
    each root letter used at most once.

    Examples:
        can_spell_from("silk", "silkworm")   -> True
        can_spell_from("silkkk", "silkworm") -> False (only one 'k')
    """
    remaining = list(root_word)
    for letter in word:
        if letter not in remaining:
            return False
        remaining.remove(letter)  # consume one occurrence
    return True


@dataclass
class GameSession:
    """
    One game of Word Scramble.

    `oracle`, `word_source` and `rng` are injected so callers (and tests)
    can pin the dictionary and the root word choice. Root word selection is
    otherwise random.
    """
    oracle: DictionaryOracle
    word_source: Callable[[], Sequence[str]]
    rng: random.Random = field(default_factory=random.Random)
    language: str = DEFAULT_LANGUAGE

    root_word: str = ""
    used_words: List[str] = field(default_factory=list)  # most recent first
    score: int = 0

    started_at: Optional[datetime] = None

    def start_or_restart(self) -> None:
        """Pick a new root word and clear the board."""
        candidates = [normalize_word(w) for w in self.word_source()]
        candidates = [w for w in candidates if w]

        if candidates:
            self.root_word = self.rng.choice(candidates)
        else:
            logger.warning(
                f"Couldn't load start words. Falling back to '{FALLBACK_ROOT_WORD}'."
            )
            self.root_word = FALLBACK_ROOT_WORD

        self.used_words = []
        self.score = 0
        self.started_at = datetime.utcnow()
        logger.debug(f"Session started with root word '{self.root_word}'")

    def submit(self, raw_input: str) -> SubmissionOutcome:
        """
        Validate a submission and, if every rule passes, record it.

        Returns an IGNORED outcome for blank input, a REJECTED outcome
        carrying the first failed rule, or an ACCEPTED outcome with the new
        score.
        """
        word = normalize_word(raw_input)
        if not word:
            return SubmissionOutcome(OutcomeStatus.IGNORED)

        kind = self._first_failed_rule(word)
        if kind is not None:
            return SubmissionOutcome(
                OutcomeStatus.REJECTED,
                word=word,
                score=self.score,
                rejection=Rejection(kind, self.root_word),
            )

        self.used_words.insert(0, word)
        self.score += 1
        return SubmissionOutcome(OutcomeStatus.ACCEPTED, word=word, score=self.score)

    def _first_failed_rule(self, word: str) -> Optional[RejectionKind]:
        # Order matters: the first failing rule is the one reported.
        if len(word) < MIN_WORD_LENGTH:
            return RejectionKind.TOO_SHORT
        if word == self.root_word:
            return RejectionKind.SAME_AS_ROOT
        if not self.is_original(word):
            return RejectionKind.ALREADY_USED
        if not self.is_possible(word):
            return RejectionKind.NOT_POSSIBLE
        if not self.is_real(word):
            return RejectionKind.NOT_REAL
        return None

    def is_original(self, word: str) -> bool:
        return word not in self.used_words

    def is_possible(self, word: str) -> bool:
        return can_spell_from(word, self.root_word)

    def is_real(self, word: str) -> bool:
        """Ask the oracle; an oracle that cannot answer counts as 'not a word'."""
        try:
            return self.oracle.is_recognized(word, self.language)
        except DictionaryUnavailableError as e:
            logger.warning(f"Dictionary unavailable for '{word}', rejecting: {e}")
            return False

    def to_dict(self) -> dict:
        """Convert session state to dictionary for debugging/logging."""
        return {
            "root_word": self.root_word,
            "score": self.score,
            "used_words": list(self.used_words),
            "language": self.language,
            "started_at": self.started_at.isoformat() if self.started_at else None,
        }
