"""
In-memory cache of directory listings for stylesheet resolution.

One DirectoryCache spans one build: the filesystem is treated as a
closed-world snapshot, so entries are never invalidated while it lives.
Several importers (and several entry stylesheets compiled together) may
share one instance; the caller decides its lifetime.
"""

from __future__ import annotations

import logging
import os
import threading
from contextlib import nullcontext
from typing import ContextManager, Dict, Iterator, Optional

from ..fs import FileSystem, LocalFileSystem, PathLike
from ..types import DirectoryEntry

logger = logging.getLogger(__name__)


class DirectoryCache:
    """
    Directory path → DirectoryEntry.

    Listing failures (missing or unreadable directory) are not cached:
    they are reported as None and may succeed on a later attempt.

    With thread_safe=True the map is guarded by a lock for hosts that run
    several compile jobs over one shared cache. The lock is never held
    while listing a directory, so two threads may list the same directory
    concurrently; the last writer wins with an identical entry.
    """

    def __init__(self, fs: Optional[FileSystem] = None, *, thread_safe: bool = False):
        self._fs: FileSystem = fs if fs is not None else LocalFileSystem()
        self._entries: Dict[str, DirectoryEntry] = {}
        self._lock: Optional[threading.Lock] = threading.Lock() if thread_safe else None
        self.listings = 0

    def _guard(self) -> ContextManager:
        return self._lock if self._lock is not None else nullcontext()

    @staticmethod
    def _key(directory: PathLike) -> str:
        return os.path.abspath(directory)

    def get(self, directory: PathLike) -> Optional[DirectoryEntry]:
        """Cached entry for a directory, without touching the filesystem."""
        with self._guard():
            return self._entries.get(self._key(directory))

    def populate(self, directory: PathLike) -> Optional[DirectoryEntry]:
        """
        List a directory once and store the result.

        Returns:
            The new entry, or None if the directory cannot be listed
        """
        key = self._key(directory)
        with self._guard():
            self.listings += 1
        try:
            listing = self._fs.list_directory(key)
        except OSError as e:
            logger.debug("Cannot list directory %s: %s", key, e)
            return None

        entry = DirectoryEntry()
        for item in listing:
            if item.is_dir:
                entry.directories.add(item.name)
            if item.is_file:
                entry.files.add(item.name)

        with self._guard():
            self._entries[key] = entry
        logger.debug("Cached directory %s (%d files, %d dirs)",
                     key, len(entry.files), len(entry.directories))
        return entry

    def lookup(self, directory: PathLike) -> Optional[DirectoryEntry]:
        """Cached entry, populating it on first use."""
        entry = self.get(directory)
        if entry is not None:
            return entry
        return self.populate(directory)

    def clear(self) -> None:
        with self._guard():
            self._entries.clear()

    def __contains__(self, directory: object) -> bool:
        if not isinstance(directory, (str, os.PathLike)):
            return False
        return self.get(directory) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        with self._guard():
            return iter(list(self._entries))


__all__ = ["DirectoryCache"]
