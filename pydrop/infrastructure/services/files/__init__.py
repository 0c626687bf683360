"""
Single-request file operations.
"""

from .operations import FileOperations, SEARCH_MODES, SHARE_VISIBILITIES

__all__ = [
    "FileOperations",
    "SEARCH_MODES",
    "SHARE_VISIBILITIES",
]
