"""
Command system for the OSINT assistant.
"""

from .command_registry import (
    Command,
    CommandDefinition,
    CommandRegistry,
    CommandSpec,
    OptionKind,
    OptionSpec,
)
from .flight_commands import (
    flight_lookup_command,
    flight_lookup_spec,
    flight_number_command,
    flight_number_spec,
)
from .osint_commands import xeuledoc_command, xeuledoc_spec
from .status_commands import health_command, health_spec

# Every command the bot serves and the deployer publishes.
# Schemas are built by the registry, which skips any that are invalid.
COMMAND_DEFINITIONS = [
    CommandDefinition(flight_number_spec, flight_number_command),
    CommandDefinition(flight_lookup_spec, flight_lookup_command),
    CommandDefinition(xeuledoc_spec, xeuledoc_command),
    CommandDefinition(health_spec, health_command),
]


def build_registry(definitions=None) -> CommandRegistry:
    """Registry loaded from the given definitions (default: COMMAND_DEFINITIONS)."""
    return CommandRegistry().load(COMMAND_DEFINITIONS if definitions is None else definitions)


__all__ = [
    "COMMAND_DEFINITIONS",
    "Command",
    "CommandDefinition",
    "CommandRegistry",
    "CommandSpec",
    "OptionKind",
    "OptionSpec",
    "build_registry",
]
