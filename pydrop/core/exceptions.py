"""
Exception taxonomy for the pydrop client.

Every error raised by the library derives from DropboxError and carries an
ErrorKind so callers can branch on the category of failure without
inspecting message text.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """Categories of failure."""
    PRECONDITION = "precondition"
    REMOTE = "remote"
    OFFSET_MISMATCH = "offset_mismatch"
    SESSION_STATE = "session_state"
    TRANSPORT = "transport"


class DropboxError(Exception):
    """Base exception for all client errors."""

    kind: ErrorKind = ErrorKind.REMOTE

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """No error kind is recovered locally."""
        return False


class PreconditionError(DropboxError):
    """A local check failed before any remote call was made."""

    kind = ErrorKind.PRECONDITION


class TransportError(DropboxError):
    """The request never produced an HTTP response."""

    kind = ErrorKind.TRANSPORT


class SessionStateError(DropboxError):
    """An upload session was driven through an illegal transition."""

    kind = ErrorKind.SESSION_STATE


class RemoteApiError(DropboxError):
    """The remote service answered with a non-success status."""

    kind = ErrorKind.REMOTE

    def __init__(
        self,
        status: int,
        endpoint: str,
        error_summary: str = "",
        error: Optional[Dict[str, Any]] = None,
        body: str = ""
    ):
        self.status = status
        self.endpoint = endpoint
        self.error_summary = error_summary
        self.error = error or {}
        self.body = body
        message = f"{endpoint} failed with HTTP {status}"
        if error_summary:
            message = f"{message}: {error_summary}"
        elif body:
            message = f"{message}: {body[:200]}"
        super().__init__(message, details=self.error)

    def summary_contains(self, tag: str) -> bool:
        """Check whether the error summary names the given error tag."""
        return tag in self.error_summary.split("/")


class AuthenticationError(RemoteApiError):
    """The bearer credential was rejected (HTTP 401)."""


class PathNotFoundError(RemoteApiError):
    """The remote path does not exist."""


class OffsetMismatchError(DropboxError):
    """Local and remote session cursors have diverged."""

    kind = ErrorKind.OFFSET_MISMATCH

    def __init__(
        self,
        session_id: Optional[str],
        expected_offset: int,
        correct_offset: Optional[int] = None,
        message: Optional[str] = None
    ):
        self.session_id = session_id
        self.expected_offset = expected_offset
        self.correct_offset = correct_offset
        if message is None:
            message = (
                f"Upload session {session_id} offset mismatch: "
                f"sent {expected_offset}, remote expects {correct_offset}"
            )
        super().__init__(message, details={
            "session_id": session_id,
            "expected_offset": expected_offset,
            "correct_offset": correct_offset,
        })
