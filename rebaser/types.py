from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional, Set


class Syntax(enum.Enum):
    """Stylesheet dialect handed to the compiler together with the contents."""
    CSS = "css"
    INDENTED = "indented"
    SCSS = "scss"


# ---- Directory listing ----

@dataclass
class DirectoryEntry:
    """
    Names of the files and subdirectories of one searched directory.

    Built once from a single listing and reused for every candidate
    looked up in that directory during one build.
    """
    files: Set[str] = field(default_factory=set)
    directories: Set[str] = field(default_factory=set)


# ---- Importer protocol ----

@dataclass(frozen=True)
class ImporterResult:
    """
    Result of loading a canonical stylesheet.

    contents are already rebased; source_map_url is the canonical location
    the compiler should reference in its own source map.
    """
    contents: str
    syntax: Syntax
    source_map_url: str


@dataclass(frozen=True)
class FinderOptions:
    from_import: bool
    # Directory of the stylesheet that contained the specifier (None when unknown)
    resolve_dir: Optional[str] = None


# Package finder: (specifier, options) -> file URL or path, or None
Finder = Callable[[str, FinderOptions], Optional[str]]


# ---- Scanner output ----

@dataclass(frozen=True)
class UrlSpan:
    """Argument of a url() function; end is exclusive."""
    start: int
    end: int
    value: str


@dataclass(frozen=True)
class ImportSpan:
    """Quoted specifier of an @import/@use/@forward rule, quotes included."""
    start: int
    end: int
    specifier: str
    rule: str = "import"


__all__ = [
    "Syntax",
    "DirectoryEntry",
    "ImporterResult",
    "FinderOptions",
    "Finder",
    "UrlSpan",
    "ImportSpan",
]
