"""
Configuration models and data structures.

This module defines the configuration models used throughout the client,
providing type safety and validation for configuration values.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional


# Largest chunk the remote service accepts per upload request.
MAX_CHUNK_SIZE = 150 * 1024 * 1024

DEFAULT_CHUNK_SIZE = 140_000_000


@dataclass
class DropboxConfig:
    """Remote API configuration."""
    access_token: Optional[str] = None
    token_env_var: str = "DROPBOX_TOKEN"
    api_url: str = "https://api.dropboxapi.com/2"
    content_url: str = "https://content.dropboxapi.com/2"
    root_namespace_id: Optional[str] = None
    timeout: float = 300.0


@dataclass
class UploadConfig:
    """Upload behaviour configuration."""
    chunk_size: int = DEFAULT_CHUNK_SIZE
    mode: str = "overwrite"
    autorename: bool = True
    mute: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"
    log_directory: str = "logs"
    max_file_size: str = "10 MB"
    backup_count: int = 5
    console_enabled: bool = True
    file_enabled: bool = False


@dataclass
class ApplicationConfig:
    """Main client configuration."""

    name: str = "pydrop"
    version: str = "0.1.0"
    debug: bool = False

    dropbox: DropboxConfig = field(default_factory=DropboxConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_file_path: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate_upload()
        self._validate_timeouts()
        self._validate_urls()

    def _validate_upload(self) -> None:
        """Validate upload settings."""
        chunk_size = self.upload.chunk_size
        if not (1 <= chunk_size <= MAX_CHUNK_SIZE):
            raise ValueError(
                f"Upload chunk size must be between 1 and {MAX_CHUNK_SIZE}, got {chunk_size}")

        if self.upload.mode not in ("overwrite", "add", "update"):
            raise ValueError(f"Unsupported upload mode: {self.upload.mode}")

    def _validate_timeouts(self) -> None:
        """Validate timeout values."""
        if self.dropbox.timeout <= 0:
            raise ValueError(
                f"Dropbox timeout must be positive, got {self.dropbox.timeout}")

    def _validate_urls(self) -> None:
        """Validate endpoint base URLs."""
        for name, url in (("api_url", self.dropbox.api_url), ("content_url", self.dropbox.content_url)):
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"Dropbox {name} must be an http(s) URL, got {url}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary."""
        return cls(
            name=data.get('name', 'pydrop'),
            version=data.get('version', '0.1.0'),
            debug=data.get('debug', False),
            dropbox=DropboxConfig(**data.get('dropbox', {})),
            upload=UploadConfig(**data.get('upload', {})),
            logging=LoggingConfig(**data.get('logging', {})),
            config_file_path=data.get('config_file_path'),
        )
