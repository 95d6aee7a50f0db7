"""
Rebasing importer base.

Provides the load logic shared by every resolution strategy: read the
canonical stylesheet, rebase its url() references onto the entry
stylesheet's directory, pack known package specifiers and pick the syntax.
"""

from __future__ import annotations

import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Iterable, MutableMapping, Optional, Tuple

from ..fs import FileSystem, LocalFileSystem, PathLike
from ..lexer import LexicalScanner, Scanner
from ..sourcemap import EditBuffer, PositionMap
from ..specifier import DEFAULT_MARKER, escape_url_chars, pack_module_specifier
from ..types import ImporterResult, Syntax
from ..urls import file_url_to_path

logger = logging.getLogger(__name__)

# Packages whose specifiers get the importing directory attached.
# A bare specifier could be relative or a package; these prefixes are unambiguous.
DEFAULT_PACKAGE_PREFIXES: Tuple[str, ...] = ("@angular/", "@material/")

# Root-relative, absolute, protocol-relative, data/chrome URLs and fragments
_SKIP_URL = re.compile(r"^((?:\w+:)?//|data:|chrome:|#|/)")

RebaseSourceMaps = MutableMapping[str, PositionMap]


def syntax_for(path: PathLike) -> Syntax:
    """Stylesheet syntax by file extension."""
    ext = os.path.splitext(os.fspath(path))[1].lower()
    if ext == ".css":
        return Syntax.CSS
    if ext == ".sass":
        return Syntax.INDENTED
    return Syntax.SCSS


class UrlRebasingImporter(ABC):
    """
    Importer base that rebases url() functions of every stylesheet it loads.

    The rebased URLs are relative to the entry stylesheet's directory, which
    is where the compiled CSS output is considered to live. The compiler only
    routes a stylesheet through load() when this importer's canonicalize()
    returned its location, so concrete subclasses must resolve imports for
    rebasing to take effect.
    """

    def __init__(
        self,
        entry_directory: PathLike,
        *,
        rebase_source_maps: Optional[RebaseSourceMaps] = None,
        package_prefixes: Iterable[str] = DEFAULT_PACKAGE_PREFIXES,
        scanner: Optional[Scanner] = None,
        fs: Optional[FileSystem] = None,
        marker: str = DEFAULT_MARKER,
    ):
        """
        Args:
            entry_directory: Directory of the entry stylesheet given to the compiler
            rebase_source_maps: When provided, every rewritten stylesheet gets its
                position map stored here under its canonical URL
            package_prefixes: Specifier prefixes that are packed with their resolve directory
            scanner: Lexical scanner for url() and rule specifiers
            fs: Filesystem used for reading stylesheets
            marker: Tag of packed module specifiers
        """
        self.entry_directory = os.path.abspath(entry_directory)
        self.rebase_source_maps = rebase_source_maps
        self.package_prefixes: Tuple[str, ...] = tuple(package_prefixes)
        self.scanner: Scanner = scanner if scanner is not None else LexicalScanner()
        self.fs: FileSystem = fs if fs is not None else LocalFileSystem()
        self.marker = marker

    @abstractmethod
    def canonicalize(self, url: str, from_import: bool = False) -> Optional[str]:
        """
        Resolve a specifier to the canonical file URL of a stylesheet.

        Returns:
            Canonical URL or None when this importer cannot resolve it

        Raises:
            AmbiguousImportError: If several files match equally
        """
        ...

    def load(self, canonical_url: str) -> Optional[ImporterResult]:
        """
        Read and rebase a canonical stylesheet.

        Returns:
            Rebased contents with syntax, or None if the file cannot be read
        """
        try:
            stylesheet_path = file_url_to_path(canonical_url)
        except ValueError:
            return None

        try:
            contents = self.fs.read_text(stylesheet_path)
        except OSError as e:
            # File removed between canonicalize and load (e.g. by a watcher)
            logger.debug("Cannot read stylesheet %s: %s", stylesheet_path, e)
            return None

        syntax = syntax_for(stylesheet_path)
        edits = self._rebase(contents, str(stylesheet_path.parent), syntax)
        if edits.has_changes:
            contents = edits.to_string()
            if self.rebase_source_maps is not None:
                self.rebase_source_maps[canonical_url] = edits.position_map()

        return ImporterResult(
            contents=contents,
            syntax=syntax,
            source_map_url=canonical_url,
        )

    def _rebase(self, contents: str, stylesheet_directory: str, syntax: Syntax) -> EditBuffer:
        edits = EditBuffer(contents)
        # `//` only starts a comment in Sass sources
        line_comments = syntax is not Syntax.CSS

        for span in self.scanner.find_urls(contents, line_comments):
            rebased = self.rebase_url(span.value, stylesheet_directory)
            if rebased is None or rebased == span.value:
                continue
            edits.update(span.start, span.end, rebased)

        for span in self.scanner.find_imports(contents, line_comments):
            if not span.specifier.startswith(self.package_prefixes):
                continue
            packed = pack_module_specifier(span.specifier, stylesheet_directory, self.marker)
            edits.update(span.start, span.end, f'"{packed}"')

        return edits

    def rebase_url(self, value: str, stylesheet_directory: str) -> Optional[str]:
        """
        Rebased form of a url() argument, or None if it must stay untouched.

        Empty values, Sass variables and absolute or special URLs are skipped.
        """
        if not value or value.startswith("$"):
            return None
        if _SKIP_URL.match(value):
            return None

        rebased_path = os.path.relpath(
            os.path.join(stylesheet_directory, value),
            self.entry_directory,
        )
        return "./" + escape_url_chars(rebased_path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(entry_directory={self.entry_directory!r})"


__all__ = [
    "DEFAULT_PACKAGE_PREFIXES",
    "RebaseSourceMaps",
    "UrlRebasingImporter",
    "syntax_for",
]
