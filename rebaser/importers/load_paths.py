from __future__ import annotations

import os
from typing import Iterable, List, Optional

from ..cache import DirectoryCache
from ..fs import PathLike
from ..urls import is_file_url, path_to_file_url
from .relative import RelativeUrlRebasingImporter


class LoadPathsUrlRebasingImporter(RelativeUrlRebasingImporter):
    """
    Resolves stylesheet specifiers against an ordered list of load paths
    and rebases the url() functions of the stylesheets it loads.
    """

    def __init__(
        self,
        entry_directory: PathLike,
        directory_cache: Optional[DirectoryCache],
        load_paths: Iterable[PathLike],
        **kwargs,
    ):
        super().__init__(entry_directory, directory_cache, **kwargs)
        self.load_paths: List[str] = [os.fspath(p) for p in load_paths]

    def canonicalize(self, url: str, from_import: bool = False) -> Optional[str]:
        if is_file_url(url):
            return super().canonicalize(url, from_import)

        for load_path in self.load_paths:
            result = super().canonicalize(
                path_to_file_url(os.path.join(load_path, url)),
                from_import,
            )
            if result is not None:
                return result

        return None


__all__ = ["LoadPathsUrlRebasingImporter"]
