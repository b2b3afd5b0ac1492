"""
Command Registry
Declarative slash command schemas and their handlers
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from osint_bot.utils.errors import CommandDefinitionError, RegistrationWarning
from osint_bot.utils.logger import get_logger

# Command handler type alias: (interaction context, bot client) -> awaitable
CommandHandler = Callable[[Any, Any], Awaitable[None]]

# Discord naming rule for chat input commands and options
NAME_REGEX = re.compile(r"^[-_a-z0-9]{1,32}$")
MAX_DESCRIPTION_LENGTH = 100
MAX_OPTIONS = 25

# Discord application command type for slash commands
CHAT_INPUT = 1


class OptionKind(Enum):
    """Discord application command option types."""

    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


def _check_name(kind: str, name: str) -> None:
    if not isinstance(name, str) or not NAME_REGEX.match(name):
        raise CommandDefinitionError(
            f"Invalid {kind} name {name!r}: must be 1-32 lowercase letters, digits, '-' or '_'"
        )


def _check_description(kind: str, name: str, description: str) -> None:
    if not isinstance(description, str) or not 1 <= len(description) <= MAX_DESCRIPTION_LENGTH:
        raise CommandDefinitionError(
            f"Invalid description for {kind} {name!r}: must be 1-{MAX_DESCRIPTION_LENGTH} characters"
        )


@dataclass(frozen=True)
class OptionSpec:
    """One typed option of a command."""

    name: str
    description: str
    kind: OptionKind = OptionKind.STRING
    required: bool = False
    min_value: Optional[int] = None
    max_value: Optional[int] = None

    def __post_init__(self):
        _check_name("option", self.name)
        _check_description("option", self.name, self.description)
        if (self.min_value is not None or self.max_value is not None) and self.kind not in (
            OptionKind.INTEGER,
            OptionKind.NUMBER,
        ):
            raise CommandDefinitionError(f"Option {self.name!r}: min/max only apply to numeric options")

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "type": self.kind.value,
            "required": self.required,
        }
        if self.min_value is not None:
            payload["min_value"] = self.min_value
        if self.max_value is not None:
            payload["max_value"] = self.max_value
        return payload


@dataclass(frozen=True)
class CommandSpec:
    """Schema of a slash command. Immutable once built."""

    name: str
    description: str
    options: Tuple[OptionSpec, ...] = field(default_factory=tuple)

    def __post_init__(self):
        _check_name("command", self.name)
        _check_description("command", self.name, self.description)

        options = tuple(self.options)
        object.__setattr__(self, "options", options)

        if len(options) > MAX_OPTIONS:
            raise CommandDefinitionError(f"Command {self.name!r} has more than {MAX_OPTIONS} options")

        names = [option.name for option in options]
        if len(names) != len(set(names)):
            raise CommandDefinitionError(f"Command {self.name!r} has duplicate option names")

        # Discord rejects required options listed after optional ones
        seen_optional = False
        for option in options:
            if option.required and seen_optional:
                raise CommandDefinitionError(
                    f"Command {self.name!r}: required option {option.name!r} follows an optional one"
                )
            seen_optional = seen_optional or not option.required

    def to_payload(self) -> Dict[str, Any]:
        """Discord application command JSON."""
        return {
            "name": self.name,
            "description": self.description,
            "type": CHAT_INPUT,
            "options": [option.to_payload() for option in self.options],
        }


SpecFactory = Callable[[], CommandSpec]


class CommandDefinition:
    """
    A spec and handler pair as declared in the command list.

    The spec may be given as a factory so that a schema error surfaces
    when the registry loads, not when the command module is imported.
    """

    def __init__(
        self,
        spec: Union[CommandSpec, SpecFactory, None],
        handler: Optional[CommandHandler],
        source: str = "",
    ):
        self.spec = spec
        self.handler = handler
        self.source = source or self._default_source(spec)

    @staticmethod
    def _default_source(spec: Any) -> str:
        if isinstance(spec, CommandSpec):
            return spec.name
        return getattr(spec, "__name__", None) or "<unnamed>"

    def resolve_spec(self) -> Optional[CommandSpec]:
        """
        Build the spec if it was declared as a factory.

        Raises:
            CommandDefinitionError: If the schema is invalid
        """
        spec = self.spec
        if callable(spec) and not isinstance(spec, CommandSpec):
            spec = spec()
        return spec if isinstance(spec, CommandSpec) else None


class Command:
    """Registered command with definition and handler."""

    def __init__(self, spec: CommandSpec, handler: CommandHandler):
        self.spec = spec
        self.handler = handler

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def description(self) -> str:
        return self.spec.description

    @property
    def options(self) -> Tuple[OptionSpec, ...]:
        return self.spec.options


class CommandRegistry:
    """Centralized command registration. Read-only once loading is done."""

    def __init__(self):
        self.logger = get_logger("CommandRegistry")
        self.commands: Dict[str, Command] = {}
        self.warnings: List[RegistrationWarning] = []

    def _skip(self, source: str, reason: str) -> None:
        warning = RegistrationWarning(f"Command {source} {reason}. Skipping.")
        self.warnings.append(warning)
        self.logger.warning(str(warning))

    def register(self, spec: CommandSpec, handler: CommandHandler) -> "CommandRegistry":
        """
        Register a command.

        Args:
            spec: Command schema
            handler: Async function to handle the command

        Returns:
            Self for chaining

        Raises:
            CommandDefinitionError: If the name is already taken
        """
        if spec.name in self.commands:
            raise CommandDefinitionError(f"Command {spec.name!r} is already registered")

        self.commands[spec.name] = Command(spec, handler)
        self.logger.debug(f"Registered command: {spec.name}")
        return self

    def load(self, definitions: Iterable[Optional[CommandDefinition]]) -> "CommandRegistry":
        """
        Register every valid definition, skipping malformed ones with a warning.

        Args:
            definitions: Declared command definitions

        Returns:
            Self for chaining
        """
        for index, definition in enumerate(definitions):
            if definition is None:
                self._skip(f"#{index}", "is empty")
                continue

            try:
                spec = definition.resolve_spec()
            except CommandDefinitionError as e:
                self._skip(definition.source, f"has an invalid schema ({e})")
                continue

            if spec is None:
                self._skip(definition.source, "is missing required 'spec' property")
                continue

            if not callable(definition.handler):
                self._skip(definition.source, "is missing required 'handler' function")
                continue

            if spec.name in self.commands:
                self._skip(definition.source, f"duplicates command name {spec.name!r}")
                continue

            self.register(spec, definition.handler)
            self.logger.info(f"Loaded command: {spec.name} - {spec.description}")

        return self

    def get(self, name: str) -> Optional[Command]:
        """
        Get a command by name.

        Args:
            name: Command name

        Returns:
            Command or None if not found
        """
        return self.commands.get(name)

    def has(self, name: str) -> bool:
        return name in self.commands

    def get_all(self) -> List[Command]:
        return list(self.commands.values())

    def specs(self) -> List[CommandSpec]:
        """Deployable command schemas, in registration order."""
        return [command.spec for command in self.commands.values()]

    def __len__(self) -> int:
        return len(self.commands)
