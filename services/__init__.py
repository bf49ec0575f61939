"""Services module for Word Scramble Bot."""
from services.dictionary import WordListOracle, LoopBridgeOracle, build_oracle
from services.word_source import load_candidate_root_words
from services.game_manager import GameManager, ChannelRound

__all__ = [
    "WordListOracle",
    "LoopBridgeOracle",
    "build_oracle",
    "load_candidate_root_words",
    "GameManager",
    "ChannelRound",
]
