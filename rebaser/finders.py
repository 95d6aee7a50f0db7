"""
Package finders for ModuleUrlRebasingImporter.

A finder maps a package specifier (e.g. "@angular/material/core") to a
location on disk. The location does not need to name an existing file:
the module importer still resolves it through extensions, partials and
directory indexes.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from .fs import PathLike
from .types import FinderOptions
from .urls import is_file_url, path_to_file_url

logger = logging.getLogger(__name__)

NODE_MODULES = "node_modules"


class NodeModulesFinder:
    """
    Node-style lookup: walk up from the importing directory and return the
    first node_modules/<specifier> that relative lookup can resolve.
    Levels holding only sibling packages of the same scope are skipped.
    """

    def __init__(self, root: Optional[PathLike] = None, modules_dir: str = NODE_MODULES):
        """
        Args:
            root: Start directory when the specifier carries no resolve directory
                (defaults to the current working directory)
            modules_dir: Name of the package directory to look for
        """
        self.root = os.path.abspath(root) if root is not None else None
        self.modules_dir = modules_dir

    def __call__(self, specifier: str, options: FinderOptions) -> Optional[str]:
        if not specifier or is_file_url(specifier):
            return None
        if specifier.startswith(("./", "../", "/")):
            return None

        start = options.resolve_dir or self.root or os.getcwd()
        current = os.path.abspath(start)
        while True:
            modules = os.path.join(current, self.modules_dir)
            if os.path.isdir(modules):
                candidate = os.path.join(modules, specifier)
                if self._resolvable(candidate):
                    logger.debug("Package %s found under %s", specifier, modules)
                    return path_to_file_url(candidate)

            parent = os.path.dirname(current)
            if parent == current:
                return None
            current = parent

    @staticmethod
    def _resolvable(candidate: str) -> bool:
        """
        True when relative lookup of candidate can succeed: it is a directory
        (index lookup) or its directory holds a file named after it, with an
        extension and optionally as a partial.
        """
        if os.path.isdir(candidate):
            return True

        directory, base = os.path.split(candidate)
        try:
            names = os.listdir(directory)
        except OSError:
            return False
        prefixes = (f"{base}.", f"_{base}.")
        return any(name.startswith(prefixes) for name in names)


__all__ = ["NodeModulesFinder", "NODE_MODULES"]
