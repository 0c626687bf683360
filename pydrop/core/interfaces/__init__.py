"""
Core interfaces defining the contracts for the client's collaborators.

These interfaces let the transport, the credential source and the local
file reader be swapped independently.
"""

from .lifecycle import IStartable, IStoppable, IHealthCheckable
from .transport import IHttpTransport, HttpResponse
from .credentials import ICredentialProvider
from .upload import (
    IUploadSession, IChunkReader, UploadSessionState, UploadSessionInfo, SESSION_TRANSITIONS
)

__all__ = [
    "IStartable",
    "IStoppable",
    "IHealthCheckable",
    "IHttpTransport",
    "HttpResponse",
    "ICredentialProvider",
    "IUploadSession",
    "IChunkReader",
    "UploadSessionState",
    "UploadSessionInfo",
    "SESSION_TRANSITIONS",
]
