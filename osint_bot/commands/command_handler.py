"""
Command Handler
Dispatches slash command interactions to registered handlers
"""

from typing import Any, Optional

from osint_bot.commands.command_registry import CommandRegistry
from osint_bot.utils.discord import DiscordUtils
from osint_bot.utils.error_handler import ErrorHandler, get_error_handler
from osint_bot.utils.logger import get_logger
from osint_bot.utils.responses import ReplySequence, ReplyUnit, Severity


class CommandHandler:
    """Looks up the command for an interaction and runs it behind the error boundary."""

    def __init__(
        self,
        client: Any,
        registry: CommandRegistry,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.logger = get_logger("Command")
        self.client = client
        self.registry = registry
        self.error_handler = error_handler or get_error_handler()

    async def dispatch(self, ctx: Any) -> bool:
        """
        Run the command named by an interaction.

        Args:
            ctx: Interaction context

        Returns:
            True if the command completed without error
        """
        name = ctx.command_name
        command = self.registry.get(name)

        if not command:
            self.logger.error(f"No command matching {name} was found.")
            unit = ReplyUnit(
                title="Unknown Command",
                description=f"Command `/{name}` is not recognized.",
                severity=Severity.ERROR,
            )
            await self.error_handler.wrap(name)(self._send_unknown)(ctx, unit)
            return False

        self.logger.info(f"Command executed: {name} by {ctx.user_label} in {ctx.guild_label}")

        run = self.error_handler.wrap(name)(command.handler)
        succeeded = await run(ctx, self.client)

        monitoring = getattr(self.client, "monitoring", None)
        if monitoring:
            monitoring.record_command(succeeded)

        if succeeded:
            self.logger.info(f"Command {name} completed successfully")
        return succeeded

    @staticmethod
    async def _send_unknown(ctx: Any, unit: ReplyUnit) -> None:
        await DiscordUtils.deliver(ctx, ReplySequence(units=(unit,), ephemeral=True))
