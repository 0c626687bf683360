"""
Domain models for remote metadata and upload bookkeeping.
"""

from .metadata import (
    Metadata, SharedLink, TemporaryLink, SearchMatch, SearchResult, FolderListing, Account
)
from .upload import WriteMode, CommitInfo, UploadSessionCursor, UploadResult, UploadMethod

__all__ = [
    "Metadata",
    "SharedLink",
    "TemporaryLink",
    "SearchMatch",
    "SearchResult",
    "FolderListing",
    "Account",
    "WriteMode",
    "CommitInfo",
    "UploadSessionCursor",
    "UploadResult",
    "UploadMethod",
]
