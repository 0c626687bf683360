"""
Logging infrastructure for the client.
"""

from .setup import setup_logging, describe_logging, InterceptHandler

__all__ = [
    "setup_logging",
    "describe_logging",
    "InterceptHandler",
]
