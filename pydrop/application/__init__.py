"""
Application layer composing the client from its collaborators.
"""

from .client import DropboxClient

__all__ = [
    "DropboxClient",
]
