"""
Error taxonomy
Exception types and the single ErrorKind -> user message table
"""

from enum import Enum
from typing import Iterable, Optional


class ErrorKind(Enum):
    """Closed set of backend failure kinds surfaced to users."""

    API_ERROR = "api_error"
    AUTH_ERROR = "auth_error"
    RATE_LIMITED = "rate_limited"
    HTTP_ERROR = "http_error"
    UNREACHABLE = "unreachable"
    PROCESS_ERROR = "process_error"
    TIMEOUT = "timeout"
    CONFIG_ERROR = "config_error"
    UNKNOWN = "unknown"


# Titles and messages shown to users, one entry per ErrorKind
ERROR_MESSAGES = {
    ErrorKind.API_ERROR: ("API Error", "The flight data service reported an error"),
    ErrorKind.AUTH_ERROR: (
        "Authentication Error",
        "Invalid API key. Please contact the administrator.",
    ),
    ErrorKind.RATE_LIMITED: (
        "Rate Limited",
        "Rate limit exceeded. Please try again later.",
    ),
    ErrorKind.HTTP_ERROR: ("API Error", "Failed to fetch flight data"),
    ErrorKind.UNREACHABLE: (
        "Service Unreachable",
        "Could not connect to flight data service. Please try again later.",
    ),
    ErrorKind.PROCESS_ERROR: ("Command Error", "The external tool returned an error"),
    ErrorKind.TIMEOUT: (
        "Timed Out",
        "The request took too long and was cancelled. Please try again later.",
    ),
    ErrorKind.CONFIG_ERROR: (
        "Configuration Error",
        "API configuration error. Please contact the administrator.",
    ),
    ErrorKind.UNKNOWN: (
        "Unexpected Error",
        "An unexpected error occurred while processing your request. Please try again later.",
    ),
}


def describe_error(kind: ErrorKind, detail: Optional[str] = None) -> str:
    """
    Build the user-facing message for an error kind.

    Args:
        kind: Error kind
        detail: Optional backend detail appended to the base message

    Returns:
        Message text
    """
    _, message = ERROR_MESSAGES[kind]
    if detail and kind in (ErrorKind.API_ERROR, ErrorKind.HTTP_ERROR, ErrorKind.UNKNOWN):
        return f"{message}: {detail}"
    return message


class OsintBotError(Exception):
    """Base class for errors raised by the bot."""


class InvalidInputError(OsintBotError):
    """User input failed validation. Reported inline, no backend call made."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ConfigError(OsintBotError):
    """Required configuration is missing. Fatal at startup only."""

    def __init__(self, missing: Iterable[str], hint: str = ""):
        self.missing = list(missing)
        self.hint = hint
        lines = ["Missing required environment variables:"]
        lines.extend(f"   - {name}" for name in self.missing)
        if hint:
            lines.append(hint)
        super().__init__("\n".join(lines))


class CommandDefinitionError(OsintBotError):
    """A command schema violates the platform naming constraints."""


class RegistrationWarning(UserWarning):
    """A command definition was malformed and skipped."""


class PublishErrorKind(Enum):
    """Deployment failure kinds."""

    AUTH = "auth"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"


PUBLISH_HINTS = {
    PublishErrorKind.AUTH: "Authentication failed. Please check your DISCORD_TOKEN.",
    PublishErrorKind.PERMISSION: "Permission denied. Please check your bot permissions.",
    PublishErrorKind.NOT_FOUND: "Application or guild not found. Please check your CLIENT_ID and GUILD_ID.",
    PublishErrorKind.TRANSPORT: "Could not reach the Discord API.",
}


class PublishError(OsintBotError):
    """Deployment-time failure. Fatal to the synchronizer run only."""

    def __init__(self, kind: PublishErrorKind, message: str = "", status: Optional[int] = None):
        self.kind = kind
        self.status = status
        super().__init__(message or PUBLISH_HINTS[kind])

    @property
    def hint(self) -> str:
        return PUBLISH_HINTS[self.kind]

    @classmethod
    def from_status(cls, status: int, body: str = "") -> "PublishError":
        """Map a Discord REST status code to a publish error."""
        if status == 401:
            kind = PublishErrorKind.AUTH
        elif status == 403:
            kind = PublishErrorKind.PERMISSION
        elif status == 404:
            kind = PublishErrorKind.NOT_FOUND
        else:
            kind = PublishErrorKind.TRANSPORT
        message = f"Discord API returned {status}"
        if body:
            message = f"{message}: {body[:200]}"
        return cls(kind, message, status=status)
