"""
Conversions between file:// URLs and filesystem paths.

Canonical locations handed to the compiler are file URLs; every
resolver works on paths internally.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union
from urllib.parse import urljoin, urlsplit
from urllib.request import url2pathname

FILE_SCHEME = "file"


def is_file_url(value: str) -> bool:
    """True for file: URLs only (file:///abs/path, file://localhost/abs/path)."""
    return value[:5].lower() == "file:"


def file_url_to_path(url: str) -> Path:
    """
    Convert a file URL into an absolute path.

    Raises:
        ValueError: If the value is not a local file URL
    """
    parts = urlsplit(url)
    if parts.scheme.lower() != FILE_SCHEME:
        raise ValueError(f"Not a file URL: {url}")
    if parts.netloc not in ("", "localhost"):
        raise ValueError(f"File URL must be local: {url}")
    if not parts.path.startswith("/"):
        raise ValueError(f"File URL must be absolute: {url}")
    return Path(url2pathname(parts.path))


def path_to_file_url(path: Union[str, os.PathLike]) -> str:
    """Absolute, normalized file URL for a path (no symlink resolution)."""
    return Path(os.path.abspath(path)).as_uri()


def join_url(url: str, suffix: str) -> str:
    """Append a raw suffix to a URL, e.g. the "/index" directory retry."""
    return url + suffix


def resolve_relative_url(base_url: str, specifier: str) -> str:
    """Resolve a specifier against the canonical URL of the importing stylesheet."""
    return urljoin(base_url, specifier)


__all__ = [
    "is_file_url",
    "file_url_to_path",
    "path_to_file_url",
    "join_url",
    "resolve_relative_url",
]
