"""
Remote path helpers.

The remote API addresses the root folder as the empty string and every
other entry with a single leading slash.
"""

import posixpath
from typing import Optional


def normalize_path(path: Optional[str]) -> str:
    """Normalise a remote path: '' for the root, '/a/b' otherwise."""
    if path is None:
        return ""
    if path.startswith(("id:", "rev:", "ns:")):
        return path
    parts = [p for p in path.replace("\\", "/").split("/") if p and p != "."]
    if not parts:
        return ""
    return "/" + "/".join(parts)


def join_path(folder: Optional[str], name: str) -> str:
    """Join a remote folder and an entry name."""
    base = normalize_path(folder)
    return normalize_path(f"{base}/{name}")


def basename(path: str) -> str:
    return posixpath.basename(normalize_path(path))
