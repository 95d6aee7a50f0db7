from __future__ import annotations

import logging
import os
from typing import Optional

from ..cache import DirectoryCache
from ..fs import PathLike
from ..specifier import unpack_module_specifier
from ..types import Finder, FinderOptions
from ..urls import is_file_url, path_to_file_url
from .relative import RelativeUrlRebasingImporter

logger = logging.getLogger(__name__)


class ModuleUrlRebasingImporter(RelativeUrlRebasingImporter):
    """
    Resolves package (module) stylesheet specifiers through a finder callback
    and rebases the url() functions of the stylesheets it loads.

    Specifiers packed by load() carry the directory of their importing
    stylesheet, which is passed on to the finder as resolve_dir.
    """

    def __init__(
        self,
        entry_directory: PathLike,
        directory_cache: Optional[DirectoryCache],
        finder: Finder,
        **kwargs,
    ):
        super().__init__(entry_directory, directory_cache, **kwargs)
        self.finder = finder

    def canonicalize(self, url: str, from_import: bool = False) -> Optional[str]:
        if is_file_url(url):
            return super().canonicalize(url, from_import)

        unpacked = unpack_module_specifier(url, self.marker)
        found = self.finder(
            unpacked.specifier,
            FinderOptions(from_import=from_import, resolve_dir=unpacked.resolve_dir),
        )
        if not found:
            return None

        logger.debug("Finder located %s at %s", unpacked.specifier, found)
        # Finder results still go through extension and partial lookup
        candidate = found if is_file_url(found) else path_to_file_url(os.fspath(found))
        return super().canonicalize(candidate, from_import)


__all__ = ["ModuleUrlRebasingImporter"]
