"""
Health monitoring
Process, gateway and backend counters behind the health command
"""

import math
import os
import platform
import time
from dataclasses import dataclass
from typing import Any, Dict, List

import psutil

from osint_bot.utils.discord import DiscordUtils

MEMORY_LIMIT_PERCENT = 90
MAX_LATENCY_MS = 500
MAX_ERRORS = 100

# Client attribute -> label for the backend call counters
BACKENDS = (
    ("flight_client", "Flight API calls"),
    ("tool_runner", "xeuledoc runs"),
)


@dataclass(frozen=True)
class HealthStatus:
    healthy: bool
    status: str
    checks: Dict[str, bool]
    timestamp: str


class Monitoring:
    """Tracks command outcomes and samples process and gateway state on demand."""

    def __init__(self, client: Any):
        self.client = client
        self.started_at = time.monotonic()
        self.metrics = {
            "commands_executed": 0,
            "commands_failed": 0,
        }

    def record_command(self, succeeded: bool = True) -> None:
        self.metrics["commands_executed"] += 1
        if not succeeded:
            self.metrics["commands_failed"] += 1

    def system_snapshot(self) -> Dict[str, Any]:
        """
        Sample the host and this process.

        Returns:
            Flat dict of memory (MB), load, uptimes and platform strings
        """
        rss = psutil.Process().memory_info().rss
        virtual = psutil.virtual_memory()
        load_1m = os.getloadavg()[0] if hasattr(os, "getloadavg") else 0.0

        return {
            "memory_mb": round(rss / 1024 / 1024),
            "memory_total_mb": round(virtual.total / 1024 / 1024),
            "memory_percent": virtual.percent,
            "load_1m": round(load_1m, 2),
            "cores": psutil.cpu_count() or 1,
            "bot_uptime": DiscordUtils.format_duration(int(time.monotonic() - self.started_at)),
            "system_uptime": DiscordUtils.format_duration(int(time.time() - psutil.boot_time())),
            "python": platform.python_version(),
            "os_name": f"{platform.system()} {platform.release()} ({platform.machine()})",
        }

    def gateway_snapshot(self) -> Dict[str, Any]:
        latency = getattr(self.client, "latency", None)
        # discord.py reports NaN until the first heartbeat
        if not isinstance(latency, (int, float)) or math.isnan(latency):
            latency = 0.0
        is_ready = getattr(self.client, "is_ready", None)

        return {
            "ready": bool(is_ready()) if callable(is_ready) else False,
            "latency_ms": latency * 1000,
            "guilds": len(getattr(self.client, "guilds", None) or []),
        }

    def backend_calls(self) -> Dict[str, int]:
        """Calls made by each external backend client since start."""
        counts = {}
        for attribute, label in BACKENDS:
            backend = getattr(self.client, attribute, None)
            if backend is not None and hasattr(backend, "calls"):
                counts[label] = backend.calls
        return counts

    def get_health_status(self, errors: int = 0) -> HealthStatus:
        """
        Evaluate the health checks.

        Args:
            errors: Unexpected errors counted by the error handler

        Returns:
            HealthStatus, healthy only when every check passes
        """
        system = self.system_snapshot()
        gateway = self.gateway_snapshot()

        checks = {
            "memory": system["memory_percent"] < MEMORY_LIMIT_PERCENT,
            "gateway": gateway["ready"],
            "latency": gateway["latency_ms"] < MAX_LATENCY_MS,
            "errors": errors < MAX_ERRORS,
        }
        healthy = all(checks.values())

        return HealthStatus(
            healthy=healthy,
            status="healthy" if healthy else "degraded",
            checks=checks,
            timestamp=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        )

    def format_health_lines(self, detailed: bool = False, errors: int = 0) -> List[str]:
        """
        Render the health report as markdown lines.

        Args:
            detailed: Add platform info and the individual checks
            errors: Unexpected errors counted by the error handler
        """
        health = self.get_health_status(errors)
        system = self.system_snapshot()
        gateway = self.gateway_snapshot()

        lines = [
            f"**Status:** {health.status.upper()}",
            "",
            "📊 **System:**",
            f"Memory: {system['memory_mb']}MB / {system['memory_total_mb']}MB",
            f"CPU Load: {system['load_1m']} ({system['cores']} cores)",
            f"Uptime: {system['bot_uptime']}",
            "",
            "🤖 **Discord:**",
            f"Ping: {gateway['latency_ms']:.0f}ms",
            f"Guilds: {gateway['guilds']}",
            "",
            "📈 **Usage:**",
            f"Commands: {self.metrics['commands_executed']} ({self.metrics['commands_failed']} failed)",
            f"Errors: {errors}",
        ]
        lines.extend(f"{label}: {count}" for label, count in self.backend_calls().items())

        if detailed:
            lines.extend([
                "",
                "🖥️ **Platform:**",
                f"Python {system['python']} on {system['os_name']}",
                f"System uptime: {system['system_uptime']}",
                "",
                "✅ **Checks:**",
            ])
            lines.extend(
                f"{'🟢' if passed else '🔴'} {name}" for name, passed in health.checks.items()
            )

        return lines
