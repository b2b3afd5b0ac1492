"""
Status Commands
Handles the health command
"""

from typing import Any

from osint_bot.commands.command_registry import CommandSpec, OptionKind, OptionSpec
from osint_bot.utils.discord import DiscordUtils
from osint_bot.utils.responses import Severity, mapper

def health_spec() -> CommandSpec:
    return CommandSpec(
        name="bob-health",
        description="Check bot health status and system metrics",
        options=(
            OptionSpec(
                "detailed",
                "Show detailed system information (default: false)",
                kind=OptionKind.BOOLEAN,
            ),
        ),
    )


async def health_command(ctx: Any, client: Any) -> None:
    """
    Show bot health status and metrics.

    Args:
        ctx: Interaction context
        client: Bot client holding the monitoring instance
    """
    detailed = bool(ctx.get_option("detailed"))
    monitoring = getattr(client, "monitoring", None)

    if not monitoring:
        sequence = mapper.info_sequence(
            "🤖 Bot Status",
            [f"**User:** {getattr(client, 'user', None)}", "**Status:** Ready"],
        )
        await DiscordUtils.deliver(ctx, sequence)
        return

    error_handler = getattr(client, "error_handler", None)
    errors = error_handler.total_errors if error_handler else 0

    health = monitoring.get_health_status(errors)
    sequence = mapper.info_sequence(
        f"{'🟢' if health.healthy else '🟡'} Bot Health",
        monitoring.format_health_lines(detailed=detailed, errors=errors),
        severity=Severity.SUCCESS if health.healthy else Severity.WARNING,
        footer=f"Checked at {health.timestamp}",
    )
    await DiscordUtils.deliver(ctx, sequence)
