"""
One build of one entry stylesheet.

RebaseSession owns what lives exactly as long as a build: the directory
listing cache and the intermediate position maps. It assembles the importer
chain a compiler would be given:

    relative → module (optional) → load paths (optional)

Several sessions compiled together may share one DirectoryCache.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional

from .cache import DirectoryCache
from .config import RebaserConfig
from .finders import NodeModulesFinder
from .fs import FileSystem, LocalFileSystem, PathLike
from .graph import StylesheetGraph, build_graph
from .importers import (
    LoadPathsUrlRebasingImporter,
    ModuleUrlRebasingImporter,
    RelativeUrlRebasingImporter,
    UrlRebasingImporter,
    bind_importer,
)
from .lexer import LexicalScanner, Scanner
from .sourcemap import PositionMap
from .types import Finder, ImporterResult
from .urls import path_to_file_url, resolve_relative_url


class RebaseSession:
    def __init__(
        self,
        entry: PathLike,
        cfg: Optional[RebaserConfig] = None,
        *,
        finder: Optional[Finder] = None,
        fs: Optional[FileSystem] = None,
        directory_cache: Optional[DirectoryCache] = None,
        scanner: Optional[Scanner] = None,
    ):
        """
        Args:
            entry: Entry stylesheet path
            cfg: Rebaser configuration (defaults when None)
            finder: Package finder for the module importer
                (NodeModulesFinder anchored at the config directory when None)
            fs: Filesystem for listings and reads
            directory_cache: Listing cache to share with other sessions
            scanner: Lexical scanner for url() and rule specifiers
        """
        self.cfg = cfg if cfg is not None else RebaserConfig()
        self.entry = Path(os.path.abspath(entry))
        self.fs = fs if fs is not None else LocalFileSystem()
        self.scanner = scanner if scanner is not None else LexicalScanner()
        self.directory_cache = (
            directory_cache if directory_cache is not None else DirectoryCache(self.fs)
        )
        self.source_maps: Optional[Dict[str, PositionMap]] = {} if self.cfg.source_maps else None
        self.finder: Finder = finder if finder is not None else NodeModulesFinder(self.cfg.base_dir)
        self._importers = self._build_importers()

    def _build_importers(self) -> List[UrlRebasingImporter]:
        common = dict(
            rebase_source_maps=self.source_maps,
            package_prefixes=self.cfg.package_prefixes,
            scanner=self.scanner,
            fs=self.fs,
            marker=self.cfg.marker,
        )
        entry_dir = self.entry.parent

        importers: List[UrlRebasingImporter] = [
            RelativeUrlRebasingImporter(entry_dir, self.directory_cache, **common)
        ]
        if self.cfg.module_resolution:
            importers.append(
                ModuleUrlRebasingImporter(entry_dir, self.directory_cache, self.finder, **common)
            )
        load_paths = self.cfg.resolve_load_paths()
        if load_paths:
            importers.append(
                LoadPathsUrlRebasingImporter(entry_dir, self.directory_cache, load_paths, **common)
            )
        return [bind_importer(i) for i in importers]

    @property
    def importers(self) -> List[UrlRebasingImporter]:
        """Bound importers in the order the compiler should try them."""
        return list(self._importers)

    def canonicalize(self, specifier: str, from_import: bool = False) -> Optional[str]:
        """First canonical URL any importer of the chain resolves the specifier to."""
        for importer in self._importers:
            canonical = importer.canonicalize(specifier, from_import)
            if canonical is not None:
                return canonical
        return None

    def resolve_from(self, specifier: str, importing_file: PathLike, from_import: bool = False) -> Optional[str]:
        """
        Resolve a rule as written in importing_file.

        Relative resolution against the file comes first, then the chain.
        """
        base = path_to_file_url(importing_file)
        relative = self._importers[0].canonicalize(resolve_relative_url(base, specifier), from_import)
        if relative is not None:
            return relative
        return self.canonicalize(specifier, from_import)

    def load(self, canonical_url: str) -> Optional[ImporterResult]:
        return self._importers[0].load(canonical_url)

    def graph(self) -> StylesheetGraph:
        return build_graph(self.entry, self._importers, scanner=self.scanner)

    def __repr__(self) -> str:
        return f"RebaseSession(entry={str(self.entry)!r}, importers={len(self._importers)})"


__all__ = ["RebaseSession"]
