"""
Command deployment
Publishes the command registry to Discord's application command catalog
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from osint_bot.commands.command_registry import CommandDefinition, CommandRegistry, CommandSpec
from osint_bot.utils.errors import PublishError, PublishErrorKind
from osint_bot.utils.logger import LoggerMixin

DISCORD_API_BASE_URL = "https://discord.com/api/v10"
DEFAULT_TIMEOUT = 10.0

GLOBAL_PROPAGATION_NOTE = "Global commands may take up to 1 hour to propagate to all servers."


@dataclass(frozen=True)
class DeploymentTarget:
    """A single guild, or global when guild_id is None."""

    guild_id: Optional[str] = None

    @classmethod
    def global_scope(cls) -> "DeploymentTarget":
        return cls(None)

    @classmethod
    def guild(cls, guild_id: str) -> "DeploymentTarget":
        if not guild_id:
            raise ValueError("guild_id is required for a guild deployment")
        return cls(str(guild_id))

    @property
    def is_global(self) -> bool:
        return self.guild_id is None

    @property
    def label(self) -> str:
        return "globally" if self.is_global else f"to guild {self.guild_id}"

    def route(self, application_id: str) -> str:
        if self.is_global:
            return f"/applications/{application_id}/commands"
        return f"/applications/{application_id}/guilds/{self.guild_id}/commands"


@dataclass(frozen=True)
class DeploymentPlan:
    """Commands to publish to one target. Consumed by a single publish."""

    target: DeploymentTarget
    commands: Tuple[CommandSpec, ...]

    def payload(self) -> List[Dict[str, Any]]:
        return [spec.to_payload() for spec in self.commands]


@dataclass
class CatalogDiff:
    """What a replace-all publish changes on the remote catalog."""

    created: List[str]
    updated: List[str]
    unchanged: List[str]
    removed: List[str]


def _comparable(command: Dict[str, Any]) -> Dict[str, Any]:
    options = []
    for option in command.get("options") or []:
        options.append({
            "name": option.get("name"),
            "description": option.get("description"),
            "type": option.get("type"),
            "required": bool(option.get("required", False)),
            "min_value": option.get("min_value"),
            "max_value": option.get("max_value"),
        })
    return {
        "description": command.get("description"),
        "type": command.get("type", 1),
        "options": options,
    }


def diff_catalog(local: Iterable[Dict[str, Any]], remote: Iterable[Dict[str, Any]]) -> CatalogDiff:
    """
    Compare local command payloads with the remote catalog.

    Args:
        local: Payloads about to be published
        remote: Commands currently registered on Discord

    Returns:
        CatalogDiff keyed by command name
    """
    remote_by_name = {command.get("name"): command for command in remote}
    diff = CatalogDiff(created=[], updated=[], unchanged=[], removed=[])

    local_names = set()
    for command in local:
        name = command["name"]
        local_names.add(name)
        existing = remote_by_name.get(name)
        if existing is None:
            diff.created.append(name)
        elif _comparable(existing) == _comparable(command):
            diff.unchanged.append(name)
        else:
            diff.updated.append(name)

    diff.removed = [name for name in remote_by_name if name not in local_names]
    return diff


class CommandCatalog(LoggerMixin):
    """Discord REST access to the application command catalog."""

    def __init__(
        self,
        token: str,
        application_id: str,
        base_url: str = DISCORD_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__("Catalog")
        self.application_id = application_id
        self.base_url = base_url
        self.timeout = timeout
        self._headers = {
            "Authorization": f"Bot {token}",
            "Content-Type": "application/json",
        }
        self._transport = transport

    async def _request(self, method: str, target: DeploymentTarget, body: Any = None) -> List[Dict[str, Any]]:
        url = f"{self.base_url}{target.route(self.application_id)}"
        try:
            async with httpx.AsyncClient(
                headers=self._headers, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.request(method, url, json=body)
        except httpx.HTTPError as e:
            raise PublishError(PublishErrorKind.TRANSPORT, f"Discord API request failed: {e}") from e

        if response.status_code >= 400:
            raise PublishError.from_status(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise PublishError(PublishErrorKind.TRANSPORT, "Discord API returned invalid JSON") from e

        if not isinstance(data, list):
            raise PublishError(PublishErrorKind.TRANSPORT, "Discord API returned an unexpected payload")
        return data

    async def fetch(self, target: DeploymentTarget) -> List[Dict[str, Any]]:
        """Commands currently registered for a target."""
        return await self._request("GET", target)

    async def replace(self, target: DeploymentTarget, commands: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Bulk overwrite: the target's catalog becomes exactly the given commands.

        Returns:
            Commands as stored by Discord
        """
        return await self._request("PUT", target, commands)


class SyncState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    DIFFING = "diffing"
    PUBLISHING = "publishing"
    DONE = "done"
    FAILED = "failed"


class DeploymentSynchronizer(LoggerMixin):
    """One-shot run: load the registry, pick the target, replace the remote catalog."""

    def __init__(self, catalog: CommandCatalog, definitions: Iterable[Optional[CommandDefinition]]):
        super().__init__("Deploy")
        self.catalog = catalog
        self.definitions = list(definitions)
        self.state = SyncState.IDLE
        self.registry: Optional[CommandRegistry] = None
        self.plan: Optional[DeploymentPlan] = None
        self.diff: Optional[CatalogDiff] = None
        self.deployed: List[Dict[str, Any]] = []
        self.failure: Optional[BaseException] = None

    def _transition(self, state: SyncState) -> None:
        self.debug(f"{self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, error: BaseException) -> int:
        self.failure = error
        self._transition(SyncState.FAILED)
        return 1

    def load(self) -> CommandRegistry:
        self._transition(SyncState.LOADING)
        self.registry = CommandRegistry().load(self.definitions)
        self.info(f"Found {len(self.registry)} valid command(s), skipped {len(self.registry.warnings)}")
        return self.registry

    def build_plan(self, target: DeploymentTarget) -> DeploymentPlan:
        if self.registry is None:
            raise RuntimeError("load() must run before build_plan()")
        return DeploymentPlan(target=target, commands=tuple(self.registry.specs()))

    async def run(self, target: DeploymentTarget) -> int:
        """
        Deploy the registry to a target.

        Args:
            target: Guild or global scope

        Returns:
            Process exit code: 0 on success, 1 on any failure
        """
        if self.state is not SyncState.IDLE:
            raise RuntimeError("A synchronizer runs only once")

        try:
            registry = self.load()
        except Exception as e:
            self.error(f"Error loading commands: {e}")
            return self._fail(e)

        if not len(registry):
            self.error("No valid commands found to deploy.")
            return self._fail(RuntimeError("no valid commands"))

        self._transition(SyncState.DIFFING)
        self.plan = self.build_plan(target)
        if target.is_global:
            self.info("Deploying commands globally...")
            self.warning(GLOBAL_PROPAGATION_NOTE)
        else:
            self.info(f"Deploying commands to guild {target.guild_id}...")

        try:
            remote = await self.catalog.fetch(target)
            self.diff = diff_catalog(self.plan.payload(), remote)
            self.info(
                f"Create: {len(self.diff.created)}, update: {len(self.diff.updated)}, "
                f"unchanged: {len(self.diff.unchanged)}, remove: {len(self.diff.removed)}"
            )

            self._transition(SyncState.PUBLISHING)
            self.info(f"Starting deployment of {len(self.plan.commands)} command(s)...")
            self.deployed = await self.catalog.replace(target, self.plan.payload())
        except PublishError as e:
            self.error(f"Error deploying commands: {e}")
            self.error(f"   {e.hint}")
            return self._fail(e)

        self._transition(SyncState.DONE)
        self.success(f"Successfully deployed {len(self.deployed)} command(s) {target.label}.")
        for index, command in enumerate(self.deployed, start=1):
            self.info(f"   {index}. {command.get('name')} - {command.get('description')}")
        return 0

    async def clear(self, target: DeploymentTarget) -> int:
        """
        Remove every command from a target by publishing an empty set.

        Returns:
            Process exit code
        """
        try:
            existing = await self.catalog.fetch(target)
            if not existing:
                self.info(f"No commands found to clear {target.label}")
                return 0
            self.info(f"Clearing {len(existing)} command(s) {target.label}...")
            if target.is_global:
                self.warning(GLOBAL_PROPAGATION_NOTE)
            await self.catalog.replace(target, [])
        except PublishError as e:
            self.error(f"Failed to clear commands: {e}")
            self.error(f"   {e.hint}")
            return 1

        self.success(f"Successfully cleared all commands {target.label}")
        return 0

    async def list_commands(self, target: DeploymentTarget) -> Optional[List[Dict[str, Any]]]:
        """
        Fetch and log the commands registered for a target.

        Returns:
            The commands, or None on failure
        """
        try:
            commands = await self.catalog.fetch(target)
        except PublishError as e:
            self.error(f"Failed to list commands: {e}")
            self.error(f"   {e.hint}")
            return None

        scope = "Global" if target.is_global else f"Guild {target.guild_id}"
        if not commands:
            self.info(f"{scope}: no commands found")
        else:
            self.info(f"{scope}: {len(commands)} command(s)")
            for index, command in enumerate(commands, start=1):
                self.info(f"   {index}. /{command.get('name')}: {command.get('description')}")
        return commands
