"""
Discord bot client setup using discord.py.
"""

import shlex
from typing import Optional

import discord

from osint_bot.bot.config import Config, config as default_config
from osint_bot.bot.interaction import InteractionContext
from osint_bot.commands import build_registry
from osint_bot.commands.command_handler import CommandHandler
from osint_bot.commands.command_registry import CommandRegistry
from osint_bot.managers.query_client import FlightDataClient, ToolRunner
from osint_bot.utils.error_handler import get_error_handler
from osint_bot.utils.logger import LoggerMixin
from osint_bot.utils.monitoring import Monitoring


class OsintBot(discord.Client, LoggerMixin):
    """Discord client serving the registered slash commands."""

    def __init__(self, settings: Optional[Config] = None, registry: Optional[CommandRegistry] = None):
        discord.Client.__init__(self, intents=discord.Intents.default())
        LoggerMixin.__init__(self, "Client")

        self.settings = settings or default_config
        self.registry = registry if registry is not None else build_registry()
        self.error_handler = get_error_handler()
        self.monitoring = Monitoring(self)

        self.flight_client = FlightDataClient(
            api_key=self.settings.AVIATIONSTACK_API_KEY,
            timeout=self.settings.QUERY_TIMEOUT,
        )
        self.tool_runner = ToolRunner(
            command=shlex.split(self.settings.XEULEDOC_PATH),
            timeout=self.settings.TOOL_TIMEOUT,
        )
        self.command_handler = CommandHandler(self, self.registry, self.error_handler)

    async def setup_hook(self) -> None:
        """Called when the bot is starting up."""
        self.error_handler.initialize()
        if not self.settings.AVIATIONSTACK_API_KEY:
            self.warning("AVIATIONSTACK_API_KEY is not set; /bob-flight will report a configuration error")
        self.success(f"Bot setup complete with {len(self.registry)} command(s)")

    async def on_ready(self) -> None:
        """Called when the bot is ready."""
        self.success(f"Logged in as: {self.user} ({self.user.id if self.user else '?'})")
        self.info(f"Serving {len(self.guilds)} guild(s), commands available: {len(self.registry)}")
        await self.change_presence(
            activity=discord.Activity(type=discord.ActivityType.watching, name="OSINT operations")
        )

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        """Handle incoming slash command interactions."""
        if interaction.type is not discord.InteractionType.application_command:
            return

        await self.command_handler.dispatch(InteractionContext(interaction))

    async def close(self) -> None:
        """Clean shutdown."""
        self.info("Shutting down bot...")
        await self.flight_client.cleanup()
        await self.tool_runner.cleanup()
        await super().close()


def create_bot(settings: Optional[Config] = None) -> OsintBot:
    """Create and return bot instance."""
    return OsintBot(settings)


async def run_bot(settings: Optional[Config] = None) -> None:
    """Validate configuration and run the bot until it is closed."""
    settings = settings or default_config
    settings.validate(("DISCORD_TOKEN",))

    bot = create_bot(settings)
    async with bot:
        await bot.start(settings.DISCORD_TOKEN)
