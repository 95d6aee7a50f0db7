"""
Stylesheet import resolution and url() rebasing for Sass compilers.

Typical use with a compiler that accepts importer objects:

    cache = DirectoryCache()
    importer = bind_importer(RelativeUrlRebasingImporter(entry_dir, cache))
    compiler.compile(entry, importers=[importer])
"""

from .cache import DirectoryCache
from .config import RebaserConfig, load_config
from .errors import AmbiguousImportError, ConfigError, RebaserUserError, StylesheetNotFoundError
from .finders import NodeModulesFinder
from .graph import StylesheetGraph, build_graph
from .importers import (
    DEFAULT_PACKAGE_PREFIXES,
    ImporterCallbacks,
    LoadPathsUrlRebasingImporter,
    ModuleUrlRebasingImporter,
    RelativeUrlRebasingImporter,
    UrlRebasingImporter,
    bind_importer,
    importer_callbacks,
)
from .lexer import LexicalScanner, find_imports, find_urls
from .session import RebaseSession
from .sourcemap import EditBuffer, PositionMap
from .specifier import pack_module_specifier, unpack_module_specifier
from .types import DirectoryEntry, FinderOptions, ImporterResult, Syntax

__all__ = [
    # Cache and data
    "DirectoryCache",
    "DirectoryEntry",
    "ImporterResult",
    "FinderOptions",
    "Syntax",

    # Importers
    "DEFAULT_PACKAGE_PREFIXES",
    "UrlRebasingImporter",
    "RelativeUrlRebasingImporter",
    "ModuleUrlRebasingImporter",
    "LoadPathsUrlRebasingImporter",
    "ImporterCallbacks",
    "bind_importer",
    "importer_callbacks",
    "NodeModulesFinder",

    # Rewriting
    "EditBuffer",
    "PositionMap",
    "LexicalScanner",
    "find_urls",
    "find_imports",
    "pack_module_specifier",
    "unpack_module_specifier",

    # Builds
    "RebaseSession",
    "RebaserConfig",
    "load_config",
    "StylesheetGraph",
    "build_graph",

    # Errors
    "RebaserUserError",
    "AmbiguousImportError",
    "StylesheetNotFoundError",
    "ConfigError",
]
