"""
Credential providers and namespace selection.
"""

from .credentials import (
    StaticTokenProvider, EnvironmentTokenProvider, PathRoot, credentials_from_config
)

__all__ = [
    "StaticTokenProvider",
    "EnvironmentTokenProvider",
    "PathRoot",
    "credentials_from_config",
]
