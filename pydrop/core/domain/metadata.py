"""
Metadata domain models.

These models wrap the JSON documents returned by the remote API. Each keeps
the raw dictionary so callers can reach fields the model does not name.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Metadata:
    """File, folder or deleted-entry metadata."""

    tag: str
    """Entry type: 'file', 'folder' or 'deleted'."""

    name: str = ""
    path_lower: Optional[str] = None
    path_display: Optional[str] = None
    id: Optional[str] = None
    client_modified: Optional[str] = None
    server_modified: Optional[str] = None
    rev: Optional[str] = None
    size: Optional[int] = None
    content_hash: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_file(self) -> bool:
        return self.tag == "file"

    @property
    def is_folder(self) -> bool:
        return self.tag == "folder"

    @property
    def is_deleted(self) -> bool:
        return self.tag == "deleted"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_tag: str = "file") -> 'Metadata':
        """Create metadata from an API response document."""
        return cls(
            tag=data.get(".tag", default_tag),
            name=data.get("name", ""),
            path_lower=data.get("path_lower"),
            path_display=data.get("path_display"),
            id=data.get("id"),
            client_modified=data.get("client_modified"),
            server_modified=data.get("server_modified"),
            rev=data.get("rev"),
            size=data.get("size"),
            content_hash=data.get("content_hash"),
            raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw) if self.raw else {
            ".tag": self.tag,
            "name": self.name,
            "path_lower": self.path_lower,
            "path_display": self.path_display,
            "id": self.id,
            "client_modified": self.client_modified,
            "server_modified": self.server_modified,
            "rev": self.rev,
            "size": self.size,
            "content_hash": self.content_hash,
        }


@dataclass
class SharedLink:
    """A shared link created for a file or folder."""
    url: str
    name: str = ""
    path_lower: Optional[str] = None
    visibility: Optional[str] = None
    expires: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SharedLink':
        permissions = data.get("link_permissions", {})
        visibility = permissions.get("resolved_visibility", {}).get(".tag")
        return cls(
            url=data.get("url", ""),
            name=data.get("name", ""),
            path_lower=data.get("path_lower"),
            visibility=visibility,
            expires=data.get("expires"),
            raw=dict(data),
        )


@dataclass
class TemporaryLink:
    """A short-lived direct link for streaming a file."""
    link: str
    metadata: Metadata

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TemporaryLink':
        return cls(
            link=data.get("link", ""),
            metadata=Metadata.from_dict(data.get("metadata", {})),
        )


@dataclass
class SearchMatch:
    """A single search hit."""
    metadata: Metadata
    match_type: Optional[str] = None


@dataclass
class SearchResult:
    """A page of search results."""
    matches: List[SearchMatch] = field(default_factory=list)
    has_more: bool = False
    cursor: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchResult':
        matches = []
        for match in data.get("matches", []):
            # search_v2 nests the entry under metadata.metadata
            wrapper = match.get("metadata", {})
            entry = wrapper.get("metadata", wrapper)
            match_type = match.get("match_type", {}).get(".tag")
            matches.append(SearchMatch(
                metadata=Metadata.from_dict(entry),
                match_type=match_type,
            ))
        return cls(
            matches=matches,
            has_more=data.get("has_more", False),
            cursor=data.get("cursor"),
        )


@dataclass
class FolderListing:
    """Entries of a folder, accumulated across pages."""
    entries: List[Metadata] = field(default_factory=list)
    cursor: Optional[str] = None
    has_more: bool = False

    def extend(self, data: Dict[str, Any]) -> None:
        """Append one page of a list_folder response."""
        self.entries.extend(Metadata.from_dict(e) for e in data.get("entries", []))
        self.cursor = data.get("cursor", self.cursor)
        self.has_more = data.get("has_more", False)


@dataclass
class Account:
    """The account that owns the access token."""
    account_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    root_namespace_id: Optional[str] = None
    home_namespace_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        root_info = data.get("root_info", {})
        return cls(
            account_id=data.get("account_id", ""),
            email=data.get("email"),
            display_name=data.get("name", {}).get("display_name"),
            root_namespace_id=root_info.get("root_namespace_id"),
            home_namespace_id=root_info.get("home_namespace_id"),
            raw=dict(data),
        )
