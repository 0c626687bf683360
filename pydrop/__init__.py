"""
pydrop - async client for the Dropbox HTTP file API.

Upload (with chunked upload sessions for large files), download, search,
share, move, copy, delete, revision history and existence checks, with
explicit credential injection.
"""

__version__ = "0.1.0"

from .core.exceptions import (
    ErrorKind, DropboxError, PreconditionError, RemoteApiError,
    AuthenticationError, PathNotFoundError, OffsetMismatchError,
    SessionStateError, TransportError
)
from .core.domain.upload import WriteMode, CommitInfo, UploadResult, UploadMethod
from .core.domain.metadata import Metadata
from .infrastructure.auth.credentials import StaticTokenProvider, EnvironmentTokenProvider, PathRoot
from .infrastructure.config.models import ApplicationConfig
from .application.client import DropboxClient

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
    "WriteMode",
    "CommitInfo",
    "UploadResult",
    "UploadMethod",
    "Metadata",
    "StaticTokenProvider",
    "EnvironmentTokenProvider",
    "PathRoot",
    "ApplicationConfig",
    "DropboxClient",
]
