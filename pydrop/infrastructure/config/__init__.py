"""
Configuration infrastructure.

This module provides configuration models and loading from files and
environment variables.
"""

from .models import ApplicationConfig, DropboxConfig, UploadConfig, LoggingConfig
from .loader import ConfigLoader

__all__ = [
    "ApplicationConfig",
    "DropboxConfig",
    "UploadConfig",
    "LoggingConfig",
    "ConfigLoader",
]
