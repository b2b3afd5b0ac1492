"""
Command deployment CLI.

Usage:
    osint-deploy-commands              # Deploy to the guild set by GUILD_ID
    osint-deploy-commands --global     # Deploy commands globally
    osint-deploy-commands --list       # List registered commands
    osint-deploy-commands --clear      # Remove all guild commands
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from rich.prompt import Confirm

from osint_bot.bot.config import Config, config as default_config
from osint_bot.bot.deployment import CommandCatalog, DeploymentSynchronizer, DeploymentTarget
from osint_bot.commands import COMMAND_DEFINITIONS
from osint_bot.utils.errors import ConfigError
from osint_bot.utils.logger import get_logger, set_default_level

logger = get_logger("DeployCLI")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="osint-deploy-commands",
        description="Publish the bot's slash commands to Discord.",
    )
    parser.add_argument(
        "-g", "--global", dest="global_scope", action="store_true",
        help="deploy globally instead of to GUILD_ID (may take up to 1 hour to propagate)",
    )
    parser.add_argument("--list", action="store_true", help="list registered commands and exit")
    parser.add_argument("--clear", action="store_true", help="remove all commands from the scope")
    parser.add_argument("--all", dest="all_scopes", action="store_true",
                        help="with --list or --clear, cover both guild and global scopes")
    parser.add_argument("--force", action="store_true", help="skip the --clear confirmation prompt")
    return parser


def resolve_targets(args: argparse.Namespace, settings: Config) -> List[DeploymentTarget]:
    """
    Pick deployment targets from the flags, validating the configuration they need.

    Raises:
        ConfigError: If a required variable is missing
    """
    settings.validate(("DISCORD_TOKEN", "CLIENT_ID"))

    if args.all_scopes and (args.list or args.clear):
        targets = []
        if settings.GUILD_ID:
            targets.append(DeploymentTarget.guild(settings.GUILD_ID))
        else:
            logger.warning("No GUILD_ID specified, skipping guild commands")
        targets.append(DeploymentTarget.global_scope())
        return targets

    if args.global_scope:
        return [DeploymentTarget.global_scope()]

    settings.validate(
        ("GUILD_ID",),
        hint="Either set GUILD_ID in .env or use --global flag for global deployment.",
    )
    return [DeploymentTarget.guild(settings.GUILD_ID)]


async def execute(
    args: argparse.Namespace,
    settings: Config,
    catalog: Optional[CommandCatalog] = None,
) -> int:
    """
    Run the requested operation.

    Returns:
        Process exit code
    """
    try:
        targets = resolve_targets(args, settings)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    catalog = catalog or CommandCatalog(token=settings.DISCORD_TOKEN, application_id=settings.CLIENT_ID)
    synchronizer = DeploymentSynchronizer(catalog, COMMAND_DEFINITIONS)

    if args.list:
        results = [await synchronizer.list_commands(target) for target in targets]
        return 0 if all(result is not None for result in results) else 1

    if args.clear:
        if not args.force and not Confirm.ask(
            "This will permanently delete all selected commands. Are you sure you want to continue?",
            default=False,
        ):
            logger.info("Operation cancelled by user")
            return 0
        codes = [await synchronizer.clear(target) for target in targets]
        return max(codes)

    target = targets[0]
    logger.info(f"Deployment started at: {datetime.now(timezone.utc).isoformat()}")
    logger.info(f"Target: {'Global' if target.is_global else f'Guild {target.guild_id}'}")
    logger.info(f"Client ID: {settings.CLIENT_ID}")

    code = await synchronizer.run(target)
    if code == 0 and not target.is_global:
        logger.info("Tip: Use --global flag to deploy commands globally to all servers.")
    return code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    if default_config.DEBUG:
        set_default_level(logging.DEBUG)

    try:
        return asyncio.run(execute(args, default_config))
    except KeyboardInterrupt:
        logger.info("Deployment interrupted by user.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
