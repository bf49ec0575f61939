"""
Round control view for Word Scramble Bot.
Restart and Stop buttons attached to the round announcement.
"""
from typing import Awaitable, Callable, Optional

import discord
from discord import ui


class RoundControlsView(ui.View):
    """
    Buttons for the host of a round.

    Restart picks a new root word and clears the board; Stop ends the round.
    """

    def __init__(
        self,
        host_id: int,
        on_restart: Optional[Callable[[discord.Interaction], Awaitable[None]]] = None,
        on_stop: Optional[Callable[[discord.Interaction], Awaitable[None]]] = None,
        timeout: Optional[float] = 3600.0
    ):
        super().__init__(timeout=timeout)
        self.host_id = host_id
        self.on_restart = on_restart
        self.on_stop = on_stop

    async def _reject_non_host(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id == self.host_id:
            return False
        await interaction.response.send_message(
            "❌ Only the host can control this round!",
            ephemeral=True
        )
        return True

    def _disable_all(self) -> None:
        for item in self.children:
            item.disabled = True

    @ui.button(
        label="Restart",
        style=discord.ButtonStyle.primary,
        emoji="🔄",
        custom_id="scramble_restart"
    )
    async def restart_button(self, interaction: discord.Interaction, button: ui.Button):
        """Handle restart button click."""
        if await self._reject_non_host(interaction):
            return

        self._disable_all()
        await interaction.response.edit_message(view=self)

        if self.on_restart:
            await self.on_restart(interaction)

        self.stop()

    @ui.button(
        label="Stop",
        style=discord.ButtonStyle.danger,
        emoji="🛑",
        custom_id="scramble_stop"
    )
    async def stop_button(self, interaction: discord.Interaction, button: ui.Button):
        """Handle stop button click."""
        if await self._reject_non_host(interaction):
            return

        self._disable_all()
        await interaction.response.edit_message(view=self)

        if self.on_stop:
            await self.on_stop(interaction)

        self.stop()
