"""
Root word source for Word Scramble Bot.

Root words live in a plain text file, one lowercase word per line.
"""
import logging
from pathlib import Path
from typing import List, Optional

from config import SETTINGS, LOGGER_NAME_GAME

logger = logging.getLogger(LOGGER_NAME_GAME)


def load_candidate_root_words(path: Optional[Path | str] = None) -> List[str]:
    """
    Read candidate root words from `path` (default: SETTINGS.start_words_path).

    Blank lines are dropped and words are lowercased. Returns an empty list
    if the file cannot be read, so a game can still start with the
    fallback word.
    """
    p = Path(path) if path is not None else SETTINGS.start_words_path
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Couldn't load start words from {p}: {e}")
        return []

    words = [line.strip().lower() for line in text.splitlines()]
    words = [w for w in words if w]
    logger.debug(f"Loaded {len(words)} start words from {p}")
    return words
