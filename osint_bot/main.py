"""
Entry point for the OSINT assistant bot.
"""

import asyncio
import logging
import sys

from osint_bot.bot.client import run_bot
from osint_bot.bot.config import config
from osint_bot.utils.errors import ConfigError
from osint_bot.utils.logger import get_logger, set_default_level

logger = get_logger("Main")


def main() -> None:
    """Main entry point."""
    if config.DEBUG:
        set_default_level(logging.DEBUG)

    try:
        logger.info("Starting Discord OSINT Assistant...")
        asyncio.run(run_bot(config))
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
        sys.exit(0)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
