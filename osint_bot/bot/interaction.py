"""
Interaction context
The slice of a Discord interaction that command handlers use
"""

from typing import Any, Dict, List, Optional

import discord

from osint_bot.utils.discord import DiscordUtils
from osint_bot.utils.responses import ReplyUnit


class InteractionContext:
    """
    Wraps a discord.Interaction with get_option/reply/defer_reply/edit_reply/follow_up.

    Tracks whether a reply was already sent or deferred so error handling
    can pick the right channel.
    """

    def __init__(self, interaction: discord.Interaction):
        self.interaction = interaction
        self.deferred = False
        self.replied = False
        self._options = self._collect_options(interaction.data or {})

    @staticmethod
    def _collect_options(data: Dict[str, Any]) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        for option in data.get("options", []) or []:
            # Subcommand groups nest their options one level down
            if "options" in option:
                options.update(InteractionContext._collect_options(option))
            elif "name" in option:
                options[option["name"]] = option.get("value")
        return options

    @property
    def command_name(self) -> str:
        data = self.interaction.data or {}
        return str(data.get("name", ""))

    @property
    def user_label(self) -> str:
        user = self.interaction.user
        return f"{user} ({user.id})" if user else "unknown user"

    @property
    def guild_label(self) -> str:
        guild = self.interaction.guild
        return f"{guild.name} ({guild.id})" if guild else "DM"

    def get_option(self, name: str) -> Optional[Any]:
        return self._options.get(name)

    @staticmethod
    def _message_kwargs(
        content: Optional[str],
        units: Optional[List[ReplyUnit]],
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if content is not None:
            kwargs["content"] = content
        if units:
            kwargs["embeds"] = DiscordUtils.to_embeds(units)
        return kwargs

    async def reply(
        self,
        content: Optional[str] = None,
        units: Optional[List[ReplyUnit]] = None,
        ephemeral: bool = False,
    ) -> None:
        await self.interaction.response.send_message(
            ephemeral=ephemeral, **self._message_kwargs(content, units)
        )
        self.replied = True

    async def defer_reply(self) -> None:
        await self.interaction.response.defer(thinking=True)
        self.deferred = True

    async def edit_reply(
        self,
        content: Optional[str] = None,
        units: Optional[List[ReplyUnit]] = None,
    ) -> None:
        await self.interaction.edit_original_response(**self._message_kwargs(content, units))
        self.replied = True

    async def follow_up(
        self,
        content: Optional[str] = None,
        units: Optional[List[ReplyUnit]] = None,
        ephemeral: bool = False,
    ) -> None:
        await self.interaction.followup.send(
            ephemeral=ephemeral, wait=True, **self._message_kwargs(content, units)
        )
