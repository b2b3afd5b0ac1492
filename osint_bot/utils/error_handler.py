"""
Error Handler
Request-boundary error handling and reporting
"""

import asyncio
import functools
import traceback
from typing import Any, Callable, Dict, Optional

from osint_bot.utils.discord import DiscordUtils
from osint_bot.utils.errors import ErrorKind, InvalidInputError
from osint_bot.utils.logger import get_logger
from osint_bot.utils.responses import ReplySequence, mapper


class ErrorHandler:
    """Turns every failure inside a command into a reply to the user."""

    def __init__(self):
        self.logger = get_logger("ErrorHandler")
        self.error_counts: Dict[str, int] = {}

    def initialize(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Install the loop-level exception handler."""
        if loop is None:
            loop = asyncio.get_running_loop()

        loop.set_exception_handler(self._async_exception_handler)
        self.logger.info("Error handlers initialized")

    def _async_exception_handler(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        exception = context.get("exception")
        if exception:
            self.handle_exception(exception, "event loop")
        else:
            message = context.get("message", "Unknown async error")
            self.logger.error(f"Async error: {message}")

    def handle_exception(self, error: BaseException, context: str = "") -> None:
        """
        Log an exception and count it.

        Args:
            error: The exception that occurred
            context: Optional context string
        """
        error_key = f"{context}:{type(error).__name__}"

        if context:
            self.logger.error(f"[{context}] {error}")
        else:
            self.logger.error(f"{error}")

        self.logger.debug(
            "Traceback:\n" + "".join(traceback.format_exception(type(error), error, error.__traceback__))
        )

        self.error_counts[error_key] = self.error_counts.get(error_key, 0) + 1

    @property
    def total_errors(self) -> int:
        return sum(self.error_counts.values())

    def sequence_for(self, error: BaseException) -> ReplySequence:
        """Reply for an exception raised inside a command."""
        if isinstance(error, InvalidInputError):
            return mapper.invalid_input_sequence(str(error))

        return ReplySequence(units=(mapper.error_unit(ErrorKind.UNKNOWN),), ephemeral=True)

    async def report(self, ctx: Any, error: BaseException, context: str = "") -> None:
        """
        Send the reply for an error, through whichever channel is still open.

        Args:
            ctx: Interaction context
            error: The exception that occurred
            context: Command name for logging
        """
        if isinstance(error, InvalidInputError):
            self.logger.info(f"[{context}] Rejected input: {error}")
        else:
            self.handle_exception(error, context)

        try:
            await DiscordUtils.deliver(ctx, self.sequence_for(error))
        except Exception as reply_error:
            self.logger.error(f"Failed to send error message to user: {reply_error}")

    def wrap(self, context: str):
        """Decorator that reports any exception raised by an async command handler."""
        def decorator(func: Callable) -> Callable:
            @functools.wraps(func)
            async def wrapper(ctx: Any, *args, **kwargs) -> bool:
                try:
                    await func(ctx, *args, **kwargs)
                    return True
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    await self.report(ctx, e, context)
                    return False
            return wrapper
        return decorator


# Global error handler instance
_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler
