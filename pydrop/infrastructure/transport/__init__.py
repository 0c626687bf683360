"""
HTTP transport implementations.
"""

from .http import AiohttpTransport

__all__ = [
    "AiohttpTransport",
]
