"""
Discord OSINT assistant: flight lookups, tracking links and OSINT tool wrappers.
"""

__version__ = "2.0.0"
__description__ = "Discord OSINT assistant using discord.py"

__all__ = ["__version__"]
