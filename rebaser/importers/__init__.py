"""
Sass importers with url() rebasing.

Three resolution strategies share one lookup routine and one
DirectoryCache:
- RelativeUrlRebasingImporter: file URLs, relative to the importing stylesheet
- ModuleUrlRebasingImporter: package specifiers through a finder callback
- LoadPathsUrlRebasingImporter: specifiers searched in configured load paths
"""

from .base import DEFAULT_PACKAGE_PREFIXES, RebaseSourceMaps, UrlRebasingImporter, syntax_for
from .binding import ImporterCallbacks, bind_importer, importer_callbacks
from .load_paths import LoadPathsUrlRebasingImporter
from .module import ModuleUrlRebasingImporter
from .relative import STYLE_EXTENSIONS, RelativeUrlRebasingImporter

__all__ = [
    # Base
    "DEFAULT_PACKAGE_PREFIXES",
    "RebaseSourceMaps",
    "UrlRebasingImporter",
    "syntax_for",

    # Strategies
    "STYLE_EXTENSIONS",
    "RelativeUrlRebasingImporter",
    "ModuleUrlRebasingImporter",
    "LoadPathsUrlRebasingImporter",

    # Binding
    "ImporterCallbacks",
    "bind_importer",
    "importer_callbacks",
]
