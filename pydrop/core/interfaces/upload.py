"""
Upload interfaces.

This module defines the contracts for the chunked upload session and the
chunk reader it consumes, together with the session state machine.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..domain.metadata import Metadata
from ..domain.upload import CommitInfo


class UploadSessionState(Enum):
    """Upload session lifecycle states."""
    IDLE = "idle"
    STARTED = "started"
    APPENDING = "appending"
    FINISHED = "finished"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadSessionState.FINISHED, UploadSessionState.ABORTED)


# Legal transitions of the session state machine.
SESSION_TRANSITIONS = {
    UploadSessionState.IDLE: {UploadSessionState.STARTED, UploadSessionState.ABORTED},
    UploadSessionState.STARTED: {
        UploadSessionState.APPENDING,
        UploadSessionState.FINISHED,
        UploadSessionState.ABORTED,
    },
    UploadSessionState.APPENDING: {
        UploadSessionState.APPENDING,
        UploadSessionState.FINISHED,
        UploadSessionState.ABORTED,
    },
    UploadSessionState.FINISHED: set(),
    UploadSessionState.ABORTED: set(),
}


@dataclass
class UploadSessionInfo:
    """Snapshot of an upload session."""
    commit: CommitInfo
    state: UploadSessionState = UploadSessionState.IDLE
    session_id: Optional[str] = None
    cursor_offset: int = 0
    chunk_sizes: List[int] = field(default_factory=list)
    last_error: Optional[str] = None

    @property
    def chunks_sent(self) -> int:
        return len(self.chunk_sizes)


class IChunkReader(ABC):
    """Sequential reader yielding bounded-size chunks of a local file."""

    @abstractmethod
    async def open(self) -> None:
        """Acquire the underlying file handle."""
        pass

    @abstractmethod
    async def read(self, size: int) -> bytes:
        """Read up to size bytes; an empty result signals end-of-file."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying file handle."""
        pass


class IUploadSession(ABC):
    """Interface for a three-phase chunked upload session."""

    @abstractmethod
    async def start(self, first_chunk: bytes) -> str:
        """Open the remote session with the first chunk; returns the session id."""
        pass

    @abstractmethod
    async def append(self, chunk: bytes) -> int:
        """Append a chunk at the current cursor; returns the new offset."""
        pass

    @abstractmethod
    async def finish(self) -> Metadata:
        """Commit the session to its destination."""
        pass

    @abstractmethod
    def get_info(self) -> UploadSessionInfo:
        """Get upload session information."""
        pass
