"""
Discord Utilities
Helper functions for Discord interactions
"""

from datetime import datetime, timezone
from typing import Any, List

import discord

from osint_bot.utils.responses import ReplySequence, ReplyUnit


class DiscordUtils:
    """Utility class for Discord-related helper functions."""

    @staticmethod
    def to_embed(unit: ReplyUnit) -> discord.Embed:
        """
        Render a reply unit as a Discord embed.

        Args:
            unit: Reply unit

        Returns:
            discord.Embed
        """
        embed = discord.Embed(
            title=unit.title,
            description=unit.description or None,
            color=unit.color,
            url=unit.url,
            timestamp=datetime.now(timezone.utc),
        )
        for field in unit.fields:
            embed.add_field(name=field.name, value=field.value, inline=field.inline)
        if unit.footer:
            embed.set_footer(text=unit.footer)
        return embed

    @staticmethod
    def to_embeds(units: List[ReplyUnit]) -> List[discord.Embed]:
        return [DiscordUtils.to_embed(unit) for unit in units]

    @staticmethod
    async def deliver(ctx: Any, sequence: ReplySequence) -> None:
        """
        Send a reply sequence: the primary unit first, then each follow-up in order.

        Each follow-up is awaited before the next one is sent.

        Args:
            ctx: Interaction context
            sequence: Units to send
        """
        if ctx.deferred and not ctx.replied:
            await ctx.edit_reply(content=sequence.preface, units=[sequence.primary])
        elif ctx.replied:
            await ctx.follow_up(content=sequence.preface, units=[sequence.primary], ephemeral=sequence.ephemeral)
        else:
            await ctx.reply(content=sequence.preface, units=[sequence.primary], ephemeral=sequence.ephemeral)

        for unit in sequence.follow_ups:
            await ctx.follow_up(units=[unit])

    @staticmethod
    def format_duration(seconds: int) -> str:
        """
        Format duration in human readable format.

        Args:
            seconds: Duration in seconds

        Returns:
            Formatted duration string
        """
        days = seconds // 86400
        hours = (seconds % 86400) // 3600
        mins = (seconds % 3600) // 60
        secs = seconds % 60

        parts: List[str] = []
        if days > 0:
            parts.append(f"{days}d")
        if hours > 0:
            parts.append(f"{hours}h")
        if mins > 0:
            parts.append(f"{mins}m")
        if secs > 0 or not parts:
            parts.append(f"{secs}s")

        return " ".join(parts)
