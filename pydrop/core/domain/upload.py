"""
Upload domain models.

Commit parameters, session cursors and the result of a finished upload.
The to_dict methods produce the exact argument shapes the remote API
expects in the Dropbox-API-Arg header.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..exceptions import PreconditionError
from .metadata import Metadata


class WriteMode(Enum):
    """Conflict policy applied at the destination path."""
    OVERWRITE = "overwrite"
    ADD = "add"
    UPDATE = "update"

    @classmethod
    def parse(cls, value: Union[str, 'WriteMode']) -> 'WriteMode':
        """Parse a mode name, raising PreconditionError for unknown modes."""
        if isinstance(value, WriteMode):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise PreconditionError(
                f"Unsupported commit mode '{value}' (expected one of: {allowed})")


class UploadMethod(Enum):
    """Which upload path carried the file."""
    SINGLE = "single"
    CHUNKED = "chunked"


@dataclass(frozen=True)
class CommitInfo:
    """Final-placement parameters, applied only when the upload commits."""
    path: str
    mode: WriteMode = WriteMode.OVERWRITE
    autorename: bool = True
    mute: bool = False
    rev: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.path:
            raise PreconditionError("Destination path cannot be empty")
        if self.mode is WriteMode.UPDATE and not self.rev:
            raise PreconditionError("Commit mode 'update' requires the revision to replace")

    def mode_arg(self) -> Union[str, Dict[str, str]]:
        if self.mode is WriteMode.UPDATE:
            return {".tag": "update", "update": self.rev or ""}
        return self.mode.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "mode": self.mode_arg(),
            "autorename": self.autorename,
            "mute": self.mute,
        }


@dataclass(frozen=True)
class UploadSessionCursor:
    """Position in a remote upload session."""
    session_id: str
    offset: int

    def to_dict(self) -> Dict[str, Any]:
        return {"session_id": self.session_id, "offset": self.offset}


@dataclass
class UploadResult:
    """Outcome of a successful upload."""
    metadata: Metadata
    method: UploadMethod
    bytes_sent: int
    chunks: int = 1
    session_id: Optional[str] = None

    @property
    def path_display(self) -> Optional[str]:
        return self.metadata.path_display

    @property
    def server_modified(self) -> Optional[str]:
        return self.metadata.server_modified
