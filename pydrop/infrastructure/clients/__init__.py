"""
Remote API clients.
"""

from .base import ClientMetrics
from .dropbox import DropboxApi, encode_api_arg, DEFAULT_API_URL, DEFAULT_CONTENT_URL

__all__ = [
    "ClientMetrics",
    "DropboxApi",
    "encode_api_arg",
    "DEFAULT_API_URL",
    "DEFAULT_CONTENT_URL",
]
