"""Views module for Word Scramble Bot."""
from views.round_controls import RoundControlsView
from views.game_ui import GameEmbed, format_word_list

__all__ = [
    "RoundControlsView",
    "GameEmbed",
    "format_word_list",
]
