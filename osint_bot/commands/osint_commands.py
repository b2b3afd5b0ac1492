"""
OSINT Commands
Wrappers around local OSINT tools
"""

from typing import Any

from osint_bot.commands.command_registry import CommandSpec, OptionSpec
from osint_bot.utils.discord import DiscordUtils
from osint_bot.utils.responses import mapper
from osint_bot.utils.validation import TrustedLink

def xeuledoc_spec() -> CommandSpec:
    return CommandSpec(
        name="bob-xeuledoc",
        description="Runs the installed xeuledoc command with a Google resource link",
        options=(
            OptionSpec("link", "The Google Docs/Sheets/Drive link to process", required=True),
        ),
    )


async def xeuledoc_command(ctx: Any, client: Any) -> None:
    """
    Run xeuledoc against a Google resource link.

    The link is checked against the trusted prefix before the tool runs.

    Args:
        ctx: Interaction context
        client: Bot client holding the tool runner
    """
    link = TrustedLink.parse(ctx.get_option("link"))

    await ctx.defer_reply()

    result = await client.tool_runner.run(link)
    await DiscordUtils.deliver(ctx, mapper.tool_units(result, client.tool_runner.tool_name))
