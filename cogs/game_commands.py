"""
Game Commands Cog for Word Scramble Bot.
Handles all slash commands related to rounds and statistics.
"""
import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands
from sqlalchemy import select, func

from config import SETTINGS, LOGGER_NAME_GAME
from database import async_session_factory
from models.db_models import PlayerStats
from services.game_manager import ChannelRound, game_manager
from views.game_ui import GameEmbed
from views.round_controls import RoundControlsView

logger = logging.getLogger(LOGGER_NAME_GAME)

ROUND_OVER_MESSAGE = "❌ That round is already over."


class GameCommands(commands.Cog):
    """Cog containing all game-related slash commands."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    scramble = app_commands.Group(
        name="scramble",
        description="Word Scramble game commands"
    )

    @scramble.command(name="start", description="Start a round, or restart the current one")
    async def start_round(self, interaction: discord.Interaction):
        """Start (or restart) a round in this channel."""
        existing = game_manager.get_round(interaction.channel_id)
        if existing and interaction.user.id != existing.host_id:
            await interaction.response.send_message(
                f"❌ A round is already running! Only <@{existing.host_id}> can restart it.",
                ephemeral=True
            )
            return

        await interaction.response.defer()
        channel_round = await game_manager.start_or_restart(
            guild_id=interaction.guild_id,
            channel_id=interaction.channel_id,
            host_id=interaction.user.id,
            replacing=existing.round_id if existing else None
        )
        if channel_round is None:
            await interaction.followup.send(ROUND_OVER_MESSAGE, ephemeral=True)
            return
        embed, view = self.round_message(channel_round, restarted=existing is not None)
        await interaction.followup.send(embed=embed, view=view)

    def round_message(self, channel_round: ChannelRound, restarted: bool = False):
        """
        Build the announcement embed and its control buttons.

        The buttons only act on this round: once it has ended or been
        replaced, pressing them does nothing but say so.
        """
        round_id = channel_round.round_id

        async def on_restart(button_interaction: discord.Interaction):
            new_round = await game_manager.start_or_restart(
                guild_id=button_interaction.guild_id,
                channel_id=button_interaction.channel_id,
                host_id=button_interaction.user.id,
                replacing=round_id
            )
            if new_round is None:
                await button_interaction.followup.send(ROUND_OVER_MESSAGE, ephemeral=True)
                return
            embed, view = self.round_message(new_round, restarted=True)
            await button_interaction.channel.send(embed=embed, view=view)

        async def on_stop(button_interaction: discord.Interaction):
            finished = await game_manager.end_round(
                button_interaction.channel_id, round_id=round_id
            )
            if finished is None:
                logger.info(f"Ignored stop of finished round {round_id}")
                await button_interaction.followup.send(ROUND_OVER_MESSAGE, ephemeral=True)
                return
            await button_interaction.channel.send(embed=GameEmbed.round_finished(finished))

        view = RoundControlsView(
            host_id=channel_round.host_id,
            on_restart=on_restart,
            on_stop=on_stop
        )
        return GameEmbed.round_started(channel_round, restarted=restarted), view

    @scramble.command(name="stop", description="End the current round (host only)")
    async def stop_round(self, interaction: discord.Interaction):
        """End the round in this channel."""
        channel_round = game_manager.get_round(interaction.channel_id)

        if not channel_round:
            await interaction.response.send_message(
                "❌ No round is running in this channel!",
                ephemeral=True
            )
            return

        if interaction.user.id != channel_round.host_id:
            await interaction.response.send_message(
                "❌ Only the host can stop the round!",
                ephemeral=True
            )
            return

        finished = await game_manager.end_round(interaction.channel_id)
        if finished:
            await interaction.response.send_message(embed=GameEmbed.round_finished(finished))
        else:
            await interaction.response.send_message("❌ No round is running.", ephemeral=True)

    @scramble.command(name="status", description="Show the current root word and score")
    async def round_status(self, interaction: discord.Interaction):
        """View current round status."""
        channel_round = game_manager.get_round(interaction.channel_id)

        if not channel_round:
            await interaction.response.send_message(
                "❌ No round is running in this channel! Use `/scramble start`.",
                ephemeral=True
            )
            return

        await interaction.response.send_message(embed=GameEmbed.round_status(channel_round))

    @scramble.command(name="words", description="List the words found this round")
    async def list_words(self, interaction: discord.Interaction):
        """List accepted words, most recent first."""
        channel_round = game_manager.get_round(interaction.channel_id)

        if not channel_round:
            await interaction.response.send_message(
                "❌ No round is running in this channel!",
                ephemeral=True
            )
            return

        await interaction.response.send_message(
            embed=GameEmbed.word_list(channel_round, limit=SETTINGS.max_listed_words)
        )

    @scramble.command(name="stats", description="Show player statistics")
    @app_commands.describe(user="Player to look up (empty = yourself)")
    async def player_stats(
        self,
        interaction: discord.Interaction,
        user: Optional[discord.User] = None
    ):
        """View player statistics."""
        target_user = user or interaction.user

        async with async_session_factory() as session:
            stmt = select(PlayerStats).where(
                PlayerStats.user_id == target_user.id,
                PlayerStats.guild_id == interaction.guild_id
            )
            result = await session.execute(stmt)
            stats = result.scalar_one_or_none()

        if not stats:
            await interaction.response.send_message(
                f"📊 **{target_user.display_name}** hasn't played in this server yet!",
                ephemeral=True
            )
            return

        embed = discord.Embed(
            title=f"📊 Stats - {target_user.display_name}",
            color=discord.Color.blue()
        )
        embed.add_field(name="🎮 Rounds played", value=str(stats.rounds_played), inline=True)
        embed.add_field(name="📝 Words found", value=str(stats.words_found), inline=True)
        embed.add_field(name="❌ Rejected", value=str(stats.rejected_attempts), inline=True)
        if stats.longest_word:
            embed.add_field(name="📏 Longest word", value=stats.longest_word, inline=True)

        await interaction.response.send_message(embed=embed)

    @scramble.command(name="leaderboard", description="Show the server leaderboard")
    @app_commands.describe(sort_by="Ranking criterion")
    @app_commands.choices(sort_by=[
        app_commands.Choice(name="Words found", value="words"),
        app_commands.Choice(name="Longest word", value="longest"),
    ])
    async def leaderboard(
        self,
        interaction: discord.Interaction,
        sort_by: str = "words"
    ):
        """View server leaderboard."""
        async with async_session_factory() as session:
            if sort_by == "longest":
                order_col = func.length(PlayerStats.longest_word).desc()
                title = "📏 Leaderboard - Longest Word"
            else:
                order_col = PlayerStats.words_found.desc()
                title = "📝 Leaderboard - Words Found"

            stmt = (
                select(PlayerStats)
                .where(
                    PlayerStats.guild_id == interaction.guild_id,
                    PlayerStats.words_found > 0
                )
                .order_by(order_col)
                .limit(10)
            )
            result = await session.execute(stmt)
            stats_list = result.scalars().all()

        if not stats_list:
            await interaction.response.send_message(
                "📊 No statistics in this server yet!",
                ephemeral=True
            )
            return

        lines = []
        for i, stats in enumerate(stats_list, 1):
            medal = "🥇" if i == 1 else "🥈" if i == 2 else "🥉" if i == 3 else f"{i}."
            if sort_by == "longest":
                value = f"{stats.longest_word} ({len(stats.longest_word)})"
            else:
                value = f"{stats.words_found} words"
            lines.append(f"{medal} <@{stats.user_id}> - {value}")

        embed = discord.Embed(title=title, description="\n".join(lines), color=discord.Color.gold())
        await interaction.response.send_message(embed=embed)

    @scramble.command(name="rules", description="Show the rules")
    async def rules(self, interaction: discord.Interaction):
        """Display game rules."""
        await interaction.response.send_message(embed=GameEmbed.rules(), ephemeral=True)


async def setup(bot: commands.Bot):
    """Setup function for loading the cog."""
    await bot.add_cog(GameCommands(bot))
