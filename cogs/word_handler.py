"""
Word Handler Cog for Word Scramble Bot.
Handles message events for word submissions during running rounds.
"""
import logging

import discord
from discord.ext import commands

from config import LOGGER_NAME_GAME
from services.game_manager import game_manager
from views.game_ui import GameEmbed

logger = logging.getLogger(LOGGER_NAME_GAME)


class WordHandler(commands.Cog):
    """Cog for handling word submissions in running rounds."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        """Handle incoming messages for word submissions."""
        if message.author.bot:
            return

        if not game_manager.has_active_round(message.channel.id):
            return

        # Messages with several words are chat, not submissions
        if len(message.content.split()) != 1:
            return

        try:
            outcome = await game_manager.submit(
                message.channel.id, message.author.id, message.content
            )
        except Exception as e:
            logger.error(f"Error processing submission in channel {message.channel.id}: {e}", exc_info=True)
            return

        if outcome is None or outcome.is_ignored:
            return

        if outcome.is_rejected:
            embed = GameEmbed.word_rejected(
                outcome.rejection, outcome.word, message.author.display_name
            )
            await message.channel.send(embed=embed)
            return

        try:
            await message.add_reaction("✅")
        except discord.HTTPException as e:
            logger.debug(f"Could not react to message {message.id}: {e}")

        embed = GameEmbed.word_accepted(outcome.word, message.author.display_name, outcome.score)
        await message.channel.send(embed=embed)


async def setup(bot: commands.Bot):
    """Setup function for loading the cog."""
    await bot.add_cog(WordHandler(bot))
