"""
Detached-callback binding for importers.

Compilers often keep importer callbacks as plain functions and call them
without the importer instance. bind_importer() captures the bound methods
once so that every later reference is the same callable.
"""

from __future__ import annotations

from typing import Callable, NamedTuple, Optional, TypeVar

from ..types import ImporterResult
from .base import UrlRebasingImporter

T = TypeVar("T", bound=UrlRebasingImporter)


class ImporterCallbacks(NamedTuple):
    canonicalize: Callable[..., Optional[str]]
    load: Callable[[str], Optional[ImporterResult]]


def bind_importer(importer: T) -> T:
    """
    Pin the bound canonicalize and load methods onto the importer instance.

    Returns:
        The same importer, for chaining
    """
    importer.canonicalize = importer.canonicalize  # type: ignore[method-assign]
    importer.load = importer.load  # type: ignore[method-assign]
    return importer


def importer_callbacks(importer: UrlRebasingImporter) -> ImporterCallbacks:
    """Bound (canonicalize, load) pair for hosts that register functions."""
    bound = bind_importer(importer)
    return ImporterCallbacks(canonicalize=bound.canonicalize, load=bound.load)


__all__ = ["ImporterCallbacks", "bind_importer", "importer_callbacks"]
