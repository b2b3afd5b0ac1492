"""
Configuration management for the OSINT assistant.
Loads environment variables and provides configuration settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv

from osint_bot.utils.errors import ConfigError

# Load environment variables from the .env file in the working directory
env_path = Path.cwd() / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_QUERY_TIMEOUT = 10.0
DEFAULT_TOOL_TIMEOUT = 60.0


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    try:
        value = float(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Config:
    """Bot configuration settings."""

    # Discord
    DISCORD_TOKEN: str = ""
    CLIENT_ID: str = ""
    GUILD_ID: str = ""

    # Flight data API
    AVIATIONSTACK_API_KEY: str = ""

    # External OSINT tool
    XEULEDOC_PATH: str = "xeuledoc"

    # Timeouts in seconds
    QUERY_TIMEOUT: float = DEFAULT_QUERY_TIMEOUT
    TOOL_TIMEOUT: float = DEFAULT_TOOL_TIMEOUT

    # Debug
    DEBUG: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            DISCORD_TOKEN=os.getenv("DISCORD_TOKEN", ""),
            CLIENT_ID=os.getenv("CLIENT_ID", ""),
            GUILD_ID=os.getenv("GUILD_ID", ""),
            AVIATIONSTACK_API_KEY=os.getenv("AVIATIONSTACK_API_KEY", ""),
            XEULEDOC_PATH=os.getenv("XEULEDOC_PATH", "") or "xeuledoc",
            QUERY_TIMEOUT=_float_env("QUERY_TIMEOUT", DEFAULT_QUERY_TIMEOUT),
            TOOL_TIMEOUT=_float_env("TOOL_TIMEOUT", DEFAULT_TOOL_TIMEOUT),
            DEBUG=os.getenv("DEBUG", "false").lower() == "true",
        )

    def missing(self, names: Iterable[str]) -> list:
        return [name for name in names if not getattr(self, name, "")]

    def validate(self, required: Optional[Iterable[str]] = None, hint: str = "") -> None:
        """
        Validate required configuration.

        Args:
            required: Setting names that must be non-empty (default: DISCORD_TOKEN)
            hint: Extra line appended to the error

        Raises:
            ConfigError: Listing every missing variable
        """
        missing = self.missing(required or ("DISCORD_TOKEN",))
        if missing:
            raise ConfigError(
                missing,
                hint or "Please check your .env file and ensure all required variables are set.",
            )


# Global config instance
config = Config.from_env()
