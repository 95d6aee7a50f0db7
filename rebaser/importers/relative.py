"""
Relative stylesheet resolution.

Implements the Sass compiler's file resolution algorithm on top of the
shared DirectoryCache:
- extension lookup (.scss, .sass, .css)
- partials (_name) and import-only files (name.import.scss)
- ambiguity detection
- one level of directory index fallback (name/index.scss)
"""

from __future__ import annotations

import os
from typing import Iterable, List, Optional, Set, Tuple

from ..cache import DirectoryCache
from ..errors import AmbiguousImportError
from ..fs import PathLike
from ..urls import file_url_to_path, join_url, path_to_file_url
from .base import UrlRebasingImporter

STYLE_EXTENSIONS: Tuple[str, ...] = (".scss", ".sass", ".css")


def _potentials(filename: str, extensions: Iterable[str], infix: str) -> Set[str]:
    out: Set[str] = set()
    for ext in extensions:
        out.add(f"{filename}{infix}{ext}")
        out.add(f"_{filename}{infix}{ext}")
    return out


class RelativeUrlRebasingImporter(UrlRebasingImporter):
    """
    Resolves file URLs of stylesheets imported via @import, @use and @forward
    and rebases the url() functions of the stylesheets it loads.
    """

    def __init__(
        self,
        entry_directory: PathLike,
        directory_cache: Optional[DirectoryCache] = None,
        **kwargs,
    ):
        """
        Args:
            entry_directory: Directory of the entry stylesheet
            directory_cache: Listing cache shared by the importers of one build
            **kwargs: Rebasing options, see UrlRebasingImporter
        """
        super().__init__(entry_directory, **kwargs)
        self.directory_cache = (
            directory_cache if directory_cache is not None else DirectoryCache(self.fs)
        )

    def canonicalize(self, url: str, from_import: bool = False) -> Optional[str]:
        return self.resolve_import(url, from_import, True)

    def resolve_import(self, url: str, from_import: bool, check_directory: bool) -> Optional[str]:
        """
        Resolve a file URL to a stylesheet file the way the Sass compiler does.

        Args:
            url: file: URL to resolve
            from_import: True for @import rules, False for @use/@forward
            check_directory: Also look for name/index.* when nothing matches

        Returns:
            Canonical file URL of the stylesheet, or None if not found

        Raises:
            AmbiguousImportError: If several candidates are equally valid
        """
        try:
            stylesheet_path = os.fspath(file_url_to_path(url))
        except ValueError:
            # Only file: URLs are handled here
            return None

        directory, basename = os.path.split(stylesheet_path)
        stem, extension = os.path.splitext(basename)
        has_style_extension = extension in STYLE_EXTENSIONS
        # The style extension is removed to allow adding the .import infix
        filename = stem if has_style_extension else basename

        extensions = (extension,) if has_style_extension else STYLE_EXTENSIONS
        import_potentials = _potentials(filename, extensions, ".import") if from_import else set()
        default_potentials = _potentials(filename, extensions, "")

        entry = self.directory_cache.lookup(directory)
        if entry is None:
            return None

        found_imports = sorted(import_potentials & entry.files)
        found_defaults = sorted(default_potentials & entry.files)
        has_potential_index = (
            check_directory and not has_style_extension and filename in entry.directories
        )

        # found_imports is only populated for @import rules
        result = self.check_found(url, found_imports)
        if result is None:
            result = self.check_found(url, found_defaults)
        if result is not None:
            return path_to_file_url(os.path.join(directory, result))

        if has_potential_index:
            return self.resolve_import(join_url(url, "/index"), from_import, False)

        return None

    @staticmethod
    def check_found(url: str, found: List[str]) -> Optional[str]:
        """
        Pick the stylesheet among the matching candidate names.

        A Sass file next to same-named CSS files wins; any other multiple
        match is ambiguous.

        Raises:
            AmbiguousImportError: If the candidates cannot be disambiguated
        """
        if not found:
            return None

        if len(found) > 1:
            without_css = [name for name in found if os.path.splitext(name)[1] != ".css"]
            # Zero means two or more CSS files, more than one means several Sass files
            if len(without_css) != 1:
                raise AmbiguousImportError(url=url, candidates=list(found))
            return without_css[0]

        return found[0]


__all__ = ["RelativeUrlRebasingImporter", "STYLE_EXTENSIONS"]
