"""
Game UI components for Word Scramble Bot.
Provides embeds for round state and submission results.
"""
from typing import List, Optional

import discord

from config import MIN_WORD_LENGTH
from models.game import Rejection
from services.game_manager import ChannelRound


def format_word_list(words: List[str], limit: Optional[int] = None) -> str:
    """One word per line, each prefixed by its length."""
    shown = words if limit is None else words[:limit]
    lines = [f"`{len(word):>2}` {word}" for word in shown]
    hidden = len(words) - len(shown)
    if hidden > 0:
        lines.append(f"*...and {hidden} more*")
    return "\n".join(lines) or "*No words yet*"


class GameEmbed:
    """Factory for creating game-related embeds."""

    @staticmethod
    def round_started(channel_round: ChannelRound, restarted: bool = False) -> discord.Embed:
        """Create embed announcing a new root word."""
        title = "🔄 New Root Word!" if restarted else "🔤 Word Scramble - Round Started!"
        embed = discord.Embed(
            title=title,
            description=(
                f"# {channel_round.root_word.upper()}\n\n"
                f"Type words of **{MIN_WORD_LENGTH}+ letters** made from these letters.\n"
                "Each letter can be used as many times as it appears."
            ),
            color=discord.Color.green()
        )
        embed.set_footer(text="Score: 0")
        return embed

    @staticmethod
    def word_accepted(word: str, player_name: str, score: int) -> discord.Embed:
        """Create embed for accepted word."""
        return discord.Embed(
            title="✅ Nice!",
            description=f"**{player_name}** found **{word}** (+1)\n\n🏅 Score: **{score}**",
            color=discord.Color.green()
        )

    @staticmethod
    def word_rejected(rejection: Rejection, word: str, player_name: str) -> discord.Embed:
        """Create embed for a rejected word."""
        embed = discord.Embed(
            title=rejection.title,
            description=rejection.message,
            color=discord.Color.orange()
        )
        embed.set_footer(text=f"{player_name} tried: {word}")
        return embed

    @staticmethod
    def round_status(channel_round: ChannelRound) -> discord.Embed:
        """Create embed summarizing the running round."""
        embed = discord.Embed(
            title="📊 Round Status",
            color=discord.Color.blue()
        )
        embed.add_field(name="Root word", value=channel_round.root_word.upper(), inline=True)
        embed.add_field(name="Score", value=str(channel_round.score), inline=True)
        embed.add_field(name="Host", value=f"<@{channel_round.host_id}>", inline=True)
        embed.add_field(
            name="Latest words",
            value=format_word_list(channel_round.used_words, limit=5),
            inline=False
        )
        return embed

    @staticmethod
    def word_list(channel_round: ChannelRound, limit: int) -> discord.Embed:
        """Create embed listing accepted words, most recent first."""
        return discord.Embed(
            title=f"📝 Words from {channel_round.root_word.upper()} ({len(channel_round.used_words)})",
            description=format_word_list(channel_round.used_words, limit=limit),
            color=discord.Color.blue()
        )

    @staticmethod
    def round_finished(channel_round: ChannelRound) -> discord.Embed:
        """Create embed for a stopped round."""
        embed = discord.Embed(
            title="🏁 Round Over",
            description=(
                f"Root word: **{channel_round.root_word.upper()}**\n"
                f"Final score: **{channel_round.score}**"
            ),
            color=discord.Color.gold()
        )

        if channel_round.contributors:
            ranking = sorted(
                channel_round.contributors.items(), key=lambda item: item[1], reverse=True
            )
            embed.add_field(
                name="👥 Players",
                value="\n".join(f"<@{uid}> - {count} words" for uid, count in ranking),
                inline=False
            )

        return embed

    @staticmethod
    def rules() -> discord.Embed:
        """Create embed describing the rules."""
        embed = discord.Embed(
            title="📜 Word Scramble Rules",
            description="Make as many words as you can from the root word!",
            color=discord.Color.blue()
        )
        embed.add_field(
            name="⚠️ A word is accepted if",
            value=(
                f"1. it has at least **{MIN_WORD_LENGTH}** letters\n"
                "2. it is **not** the root word itself\n"
                "3. nobody has found it yet this round\n"
                "4. it can be spelled with the root word's letters\n"
                "5. it is a real English word"
            ),
            inline=False
        )
        embed.add_field(
            name="🎮 Commands",
            value=(
                "`/scramble start` - start or restart a round\n"
                "`/scramble stop` - end the round (host only)\n"
                "`/scramble status` - current root word and score\n"
                "`/scramble words` - words found so far\n"
                "`/scramble stats` - player statistics\n"
                "`/scramble leaderboard` - server ranking"
            ),
            inline=False
        )
        return embed
