"""
Discord client, configuration and command deployment.
"""

from .config import Config, config

__all__ = ["Config", "config"]
