"""
Word Scramble Discord Bot - Main Entry Point

Players make as many words as they can from a random root word.
Features:
- One round per channel, open to everyone in the channel
- Five-rule word validation (length, root word, originality, letters, dictionary)
- Pluggable dictionary (Free Dictionary API, OpenAI/Anthropic, local word list)
- Statistics and leaderboards
"""
import asyncio
import logging
import sys
from pathlib import Path
from typing import List

import discord
from discord import app_commands
from discord.ext import commands

from config import (
    SETTINGS,
    DictionaryBackend,
    LOGGER_NAME_MAIN,
    LOGGER_NAME_GAME,
    LOGGER_NAME_DICTIONARY,
    LOGGER_NAME_DB,
)
from database import init_database, close_database

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
BOT_LOGGERS = [LOGGER_NAME_MAIN, LOGGER_NAME_GAME, LOGGER_NAME_DICTIONARY, LOGGER_NAME_DB]

EXTENSIONS = [
    "cogs.game_commands",
    "cogs.word_handler",
]


def setup_logging(log_dir: Path = Path("logs")) -> logging.Logger:
    """Send bot logs to stdout and logs/bot.log; discord.py only logs warnings."""
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if SETTINGS.dev_mode else logging.INFO)

    log_dir.mkdir(exist_ok=True)
    logfile = logging.FileHandler(log_dir / "bot.log", encoding="utf-8", mode="a")
    logfile.setLevel(logging.DEBUG)

    for handler in (console, logfile):
        handler.setFormatter(formatter)

    for name in BOT_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        logger.addHandler(console)
        logger.addHandler(logfile)

    discord_logger = logging.getLogger("discord")
    discord_logger.setLevel(logging.WARNING)
    discord_logger.addHandler(console)

    return logging.getLogger(LOGGER_NAME_MAIN)


def check_configuration() -> List[str]:
    """Return the configuration problems that prevent startup."""
    problems = []

    if not SETTINGS.discord_token:
        problems.append("DISCORD_TOKEN not set! Please set it in .env file.")

    backend = SETTINGS.dictionary_backend.lower()
    if backend == DictionaryBackend.AI:
        if SETTINGS.ai_provider == "openai" and not SETTINGS.openai_api_key:
            problems.append("OPENAI_API_KEY not set! Please set it in .env file.")
        elif SETTINGS.ai_provider == "anthropic" and not SETTINGS.anthropic_api_key:
            problems.append("ANTHROPIC_API_KEY not set! Please set it in .env file.")
    elif backend == DictionaryBackend.WORDLIST:
        if SETTINGS.dictionary_path is None:
            problems.append("DICTIONARY_PATH not set! The wordlist backend needs a word list file.")
    elif backend != DictionaryBackend.API:
        problems.append(f"Unknown DICTIONARY_BACKEND: {SETTINGS.dictionary_backend}")

    return problems


class WordScrambleBot(commands.Bot):
    """Discord client hosting Word Scramble rounds."""

    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True  # submissions are plain messages

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
            activity=discord.Game(name="/scramble start")
        )
        self.logger = logging.getLogger(LOGGER_NAME_MAIN)
        self.tree.error(self.on_app_command_error)

    async def setup_hook(self):
        """Create tables, load cogs and register slash commands."""
        await init_database()

        for extension in EXTENSIONS:
            try:
                await self.load_extension(extension)
            except commands.ExtensionError as e:
                self.logger.error(f"Failed to load cog {extension}: {e}")
                raise
            self.logger.info(f"Loaded cog: {extension}")

        try:
            synced = await self.tree.sync()
        except discord.HTTPException as e:
            self.logger.error(f"Failed to sync commands: {e}")
        else:
            self.logger.info(f"Synced {len(synced)} slash commands")

    async def on_ready(self):
        self.logger.info(
            f"Logged in as {self.user} (ID: {self.user.id}) in {len(self.guilds)} guilds; "
            f"dictionary backend: {SETTINGS.dictionary_backend}, dev mode: {SETTINGS.dev_mode}"
        )

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError
    ):
        """Log slash command failures and tell the user something went wrong."""
        command = interaction.command.qualified_name if interaction.command else "?"
        self.logger.error(f"Error in /{command}: {error}", exc_info=error)

        message = "❌ Something went wrong. Please try again."
        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)

    async def close(self):
        """Finish running rounds, close dictionary clients and the database."""
        self.logger.info("Shutting down bot...")

        from services.game_manager import game_manager
        await game_manager.close()
        await close_database()

        await super().close()


async def main():
    logger = setup_logging()
    logger.info("Starting Word Scramble Bot...")

    problems = check_configuration()
    if problems:
        for problem in problems:
            logger.error(problem)
        sys.exit(1)

    bot = WordScrambleBot()
    try:
        async with bot:
            await bot.start(SETTINGS.discord_token)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    finally:
        if not bot.is_closed():
            await bot.close()


if __name__ == "__main__":
    asyncio.run(main())
