"""
Base Manager
Base class for the clients that talk to external backends
"""

from typing import Optional

from osint_bot.utils.logger import LoggerMixin

DEFAULT_TIMEOUT = 10.0


class BaseManager(LoggerMixin):
    """Base class for backend clients with a fixed timeout and no retries."""

    def __init__(self, name: str, timeout: Optional[float] = None):
        super().__init__(name)
        self.timeout = timeout if timeout and timeout > 0 else DEFAULT_TIMEOUT
        self.calls = 0

    def record_call(self) -> None:
        """Count a backend call."""
        self.calls += 1

    async def cleanup(self) -> None:
        """Release resources held by the client."""
        self.debug(f"{self.__class__.__name__} cleaned up after {self.calls} call(s)")
