"""
Tests for publishing commands to Discord's application command catalog.
"""

import argparse
import json

import httpx
import pytest

from osint_bot.bot.config import Config
from osint_bot.bot.deployment import (
    CommandCatalog,
    DeploymentSynchronizer,
    DeploymentTarget,
    SyncState,
    diff_catalog,
)
from osint_bot.commands import COMMAND_DEFINITIONS
from osint_bot.commands.command_registry import CommandDefinition, CommandSpec, OptionSpec
from osint_bot.deploy_commands import build_parser, execute, resolve_targets
from osint_bot.utils.errors import ConfigError, PublishError, PublishErrorKind

APP_ID = "123456"
GUILD = DeploymentTarget.guild("987")


async def noop(ctx, client):
    return None


class FakeDiscordApi:
    """In-memory command catalog keyed by route."""

    def __init__(self, status=None):
        self.status = status
        self.catalogs = {}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))
        if self.status:
            return httpx.Response(self.status, json={"message": "nope"})

        if request.method == "PUT":
            commands = json.loads(request.content)
            stored = [dict(command, id=str(index)) for index, command in enumerate(commands)]
            self.catalogs[request.url.path] = stored
        return httpx.Response(200, json=self.catalogs.get(request.url.path, []))

    def catalog(self) -> CommandCatalog:
        return CommandCatalog(
            token="bot-token",
            application_id=APP_ID,
            transport=httpx.MockTransport(self),
        )


def test_targets_and_routes():
    assert DeploymentTarget.global_scope().route(APP_ID) == f"/applications/{APP_ID}/commands"
    assert GUILD.route(APP_ID) == f"/applications/{APP_ID}/guilds/987/commands"
    assert DeploymentTarget.global_scope().is_global

    with pytest.raises(ValueError):
        DeploymentTarget.guild("")


@pytest.mark.asyncio
async def test_publishes_valid_commands_and_skips_malformed():
    api = FakeDiscordApi()
    definitions = [
        CommandDefinition(CommandSpec("bob-one", "first"), noop),
        CommandDefinition(CommandSpec("bob-two", "second"), None),
        CommandDefinition(CommandSpec("bob-three", "third"), noop),
    ]
    synchronizer = DeploymentSynchronizer(api.catalog(), definitions)

    code = await synchronizer.run(GUILD)

    assert code == 0
    assert synchronizer.state is SyncState.DONE
    assert len(synchronizer.registry.warnings) == 1
    stored = api.catalogs[f"/api/v10/applications/{APP_ID}/guilds/987/commands"]
    assert [command["name"] for command in stored] == ["bob-one", "bob-three"]
    assert synchronizer.diff.created == ["bob-one", "bob-three"]
    assert [method for method, _ in api.requests] == ["GET", "PUT"]


@pytest.mark.asyncio
async def test_invalid_schema_is_skipped_not_published():
    api = FakeDiscordApi()
    definitions = [
        CommandDefinition(lambda: CommandSpec("bob-one", "first"), noop),
        CommandDefinition(lambda: CommandSpec("BOB TWO", "second"), noop, source="bob-two"),
    ]
    synchronizer = DeploymentSynchronizer(api.catalog(), definitions)

    assert await synchronizer.run(GUILD) == 0
    assert len(synchronizer.registry.warnings) == 1
    assert "bob-two" in str(synchronizer.registry.warnings[0])
    stored = api.catalogs[f"/api/v10/applications/{APP_ID}/guilds/987/commands"]
    assert [command["name"] for command in stored] == ["bob-one"]


@pytest.mark.asyncio
async def test_publish_is_idempotent():
    api = FakeDiscordApi()

    first = DeploymentSynchronizer(api.catalog(), COMMAND_DEFINITIONS)
    assert await first.run(GUILD) == 0
    snapshot = json.loads(json.dumps(api.catalogs))

    second = DeploymentSynchronizer(api.catalog(), COMMAND_DEFINITIONS)
    assert await second.run(GUILD) == 0

    assert api.catalogs == snapshot
    assert second.diff.created == []
    assert second.diff.updated == []
    assert len(second.diff.unchanged) == len(COMMAND_DEFINITIONS)


@pytest.mark.asyncio
async def test_publish_replaces_stale_commands():
    api = FakeDiscordApi()
    old = [CommandDefinition(CommandSpec("bob-old", "gone soon"), noop)]
    assert await DeploymentSynchronizer(api.catalog(), old).run(GUILD) == 0

    synchronizer = DeploymentSynchronizer(api.catalog(), COMMAND_DEFINITIONS)
    assert await synchronizer.run(GUILD) == 0

    assert synchronizer.diff.removed == ["bob-old"]
    names = {command["name"] for catalog in api.catalogs.values() for command in catalog}
    assert "bob-old" not in names


@pytest.mark.asyncio
async def test_global_publish_uses_global_route():
    api = FakeDiscordApi()

    code = await DeploymentSynchronizer(api.catalog(), COMMAND_DEFINITIONS).run(DeploymentTarget.global_scope())

    assert code == 0
    assert list(api.catalogs) == [f"/api/v10/applications/{APP_ID}/commands"]


@pytest.mark.parametrize(
    "status, kind",
    [
        (401, PublishErrorKind.AUTH),
        (403, PublishErrorKind.PERMISSION),
        (404, PublishErrorKind.NOT_FOUND),
        (500, PublishErrorKind.TRANSPORT),
    ],
)
@pytest.mark.asyncio
async def test_publish_failures_exit_nonzero(status, kind):
    api = FakeDiscordApi(status=status)
    synchronizer = DeploymentSynchronizer(api.catalog(), COMMAND_DEFINITIONS)

    code = await synchronizer.run(GUILD)

    assert code == 1
    assert synchronizer.state is SyncState.FAILED
    assert isinstance(synchronizer.failure, PublishError)
    assert synchronizer.failure.kind is kind
    assert synchronizer.failure.status == status


@pytest.mark.asyncio
async def test_no_valid_commands_makes_no_request():
    api = FakeDiscordApi()
    synchronizer = DeploymentSynchronizer(api.catalog(), [CommandDefinition(None, noop)])

    assert await synchronizer.run(GUILD) == 1
    assert synchronizer.state is SyncState.FAILED
    assert api.requests == []


@pytest.mark.asyncio
async def test_synchronizer_runs_once():
    api = FakeDiscordApi()
    synchronizer = DeploymentSynchronizer(api.catalog(), COMMAND_DEFINITIONS)
    await synchronizer.run(GUILD)

    with pytest.raises(RuntimeError):
        await synchronizer.run(GUILD)


@pytest.mark.asyncio
async def test_transport_error_is_publish_error():
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    catalog = CommandCatalog("bot-token", APP_ID, transport=httpx.MockTransport(handler))

    with pytest.raises(PublishError) as excinfo:
        await catalog.fetch(GUILD)

    assert excinfo.value.kind is PublishErrorKind.TRANSPORT


@pytest.mark.asyncio
async def test_clear_and_list():
    api = FakeDiscordApi()
    synchronizer = DeploymentSynchronizer(api.catalog(), COMMAND_DEFINITIONS)
    await synchronizer.run(GUILD)

    listed = await synchronizer.list_commands(GUILD)
    assert len(listed) == len(COMMAND_DEFINITIONS)

    assert await synchronizer.clear(GUILD) == 0
    assert await synchronizer.list_commands(GUILD) == []
    assert await synchronizer.clear(GUILD) == 0


def test_diff_detects_option_changes():
    local = [CommandSpec("bob-a", "a", options=(OptionSpec("x", "new text"),)).to_payload()]
    remote = [CommandSpec("bob-a", "a", options=(OptionSpec("x", "old text"),)).to_payload()]

    diff = diff_catalog(local, remote)

    assert diff.updated == ["bob-a"]


def settings(**overrides):
    values = {"DISCORD_TOKEN": "token", "CLIENT_ID": APP_ID, "GUILD_ID": "987"}
    values.update(overrides)
    return Config(**values)


def parse(*argv) -> argparse.Namespace:
    return build_parser().parse_args(list(argv))


def test_resolve_guild_target():
    assert resolve_targets(parse(), settings()) == [GUILD]


def test_resolve_global_target_without_guild():
    assert resolve_targets(parse("--global"), settings(GUILD_ID="")) == [DeploymentTarget.global_scope()]


def test_resolve_requires_guild_without_global_flag():
    with pytest.raises(ConfigError) as excinfo:
        resolve_targets(parse(), settings(GUILD_ID=""))

    assert excinfo.value.missing == ["GUILD_ID"]
    assert "--global" in str(excinfo.value)


def test_resolve_reports_every_missing_credential():
    with pytest.raises(ConfigError) as excinfo:
        resolve_targets(parse(), settings(DISCORD_TOKEN="", CLIENT_ID=""))

    assert excinfo.value.missing == ["DISCORD_TOKEN", "CLIENT_ID"]


def test_resolve_all_scopes_for_list():
    targets = resolve_targets(parse("--list", "--all"), settings())

    assert targets == [GUILD, DeploymentTarget.global_scope()]


@pytest.mark.asyncio
async def test_execute_deploys():
    api = FakeDiscordApi()

    assert await execute(parse(), settings(), catalog=api.catalog()) == 0
    assert len(api.catalogs[f"/api/v10/applications/{APP_ID}/guilds/987/commands"]) == len(COMMAND_DEFINITIONS)


@pytest.mark.asyncio
async def test_execute_missing_config_exits_nonzero():
    api = FakeDiscordApi()

    assert await execute(parse(), settings(GUILD_ID=""), catalog=api.catalog()) == 1
    assert api.requests == []


@pytest.mark.asyncio
async def test_execute_forced_clear():
    api = FakeDiscordApi()
    await execute(parse(), settings(), catalog=api.catalog())

    assert await execute(parse("--clear", "--force"), settings(), catalog=api.catalog()) == 0
    assert all(catalog == [] for catalog in api.catalogs.values())


@pytest.mark.asyncio
async def test_execute_clear_cancelled(monkeypatch):
    api = FakeDiscordApi()
    monkeypatch.setattr("osint_bot.deploy_commands.Confirm.ask", lambda *args, **kwargs: False)

    assert await execute(parse("--clear"), settings(), catalog=api.catalog()) == 0
    assert api.requests == []


@pytest.mark.asyncio
async def test_execute_list_failure():
    api = FakeDiscordApi(status=401)

    assert await execute(parse("--list"), settings(), catalog=api.catalog()) == 1
