"""
Credential provider interface.

Operations receive their bearer token from an injected provider instead
of a process-wide default.
"""

from abc import ABC, abstractmethod


class ICredentialProvider(ABC):
    """Interface for objects that supply a bearer access token."""

    @abstractmethod
    async def get_token(self) -> str:
        """
        Get a valid bearer token.

        Raises:
            PreconditionError: If no token is available
        """
        pass
