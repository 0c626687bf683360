"""
Credential providers and the path-root selector.

Tokens are handed to the client explicitly; obtaining and storing them is
left to the caller.
"""

import json
import os
from dataclasses import dataclass
from typing import Dict, Optional

from ...core.domain.metadata import Account
from ...core.exceptions import PreconditionError
from ...core.interfaces.credentials import ICredentialProvider


class StaticTokenProvider(ICredentialProvider):
    """Provider returning a fixed token."""

    def __init__(self, token: str):
        if not token:
            raise PreconditionError("Access token cannot be empty")
        self._token = token

    async def get_token(self) -> str:
        return self._token

    def __repr__(self) -> str:
        return "StaticTokenProvider(token=***)"


class EnvironmentTokenProvider(ICredentialProvider):
    """Provider reading the token from an environment variable on each call."""

    def __init__(self, variable: str = "DROPBOX_TOKEN"):
        self._variable = variable

    async def get_token(self) -> str:
        token = os.getenv(self._variable)
        if not token:
            raise PreconditionError(
                f"No access token found in environment variable {self._variable}")
        return token


@dataclass(frozen=True)
class PathRoot:
    """Namespace that receives reads and writes."""
    namespace_id: str

    def header_value(self) -> str:
        return json.dumps({".tag": "root", "root": self.namespace_id})

    def headers(self) -> Dict[str, str]:
        return {"Dropbox-API-Path-Root": self.header_value()}

    @classmethod
    def from_account(cls, account: Account) -> 'PathRoot':
        """Select the account's root namespace (the team space for team members)."""
        if not account.root_namespace_id:
            raise PreconditionError(
                f"Account {account.account_id} reports no root namespace")
        return cls(namespace_id=account.root_namespace_id)


def credentials_from_config(
    access_token: Optional[str],
    token_env_var: str = "DROPBOX_TOKEN"
) -> ICredentialProvider:
    """Build a provider from configured values, preferring an explicit token."""
    if access_token:
        return StaticTokenProvider(access_token)
    return EnvironmentTokenProvider(token_env_var)
