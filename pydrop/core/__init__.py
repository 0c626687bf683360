"""
Core module containing domain models, service interfaces and the error taxonomy.

This module is independent of the HTTP library and of configuration and
logging concerns.
"""

from .exceptions import (
    ErrorKind, DropboxError, PreconditionError, RemoteApiError,
    AuthenticationError, PathNotFoundError, OffsetMismatchError,
    SessionStateError, TransportError
)
from .domain.metadata import Metadata, SharedLink, TemporaryLink, SearchResult, FolderListing, Account
from .domain.upload import WriteMode, CommitInfo, UploadSessionCursor, UploadResult, UploadMethod

__all__ = [
    "ErrorKind",
    "DropboxError",
    "PreconditionError",
    "RemoteApiError",
    "AuthenticationError",
    "PathNotFoundError",
    "OffsetMismatchError",
    "SessionStateError",
    "TransportError",
    "Metadata",
    "SharedLink",
    "TemporaryLink",
    "SearchResult",
    "FolderListing",
    "Account",
    "WriteMode",
    "CommitInfo",
    "UploadSessionCursor",
    "UploadResult",
    "UploadMethod",
]
