from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Union, runtime_checkable

PathLike = Union[str, os.PathLike]


@dataclass(frozen=True)
class DirEntryInfo:
    name: str
    is_file: bool
    is_dir: bool


@runtime_checkable
class FileSystem(Protocol):
    """
    Filesystem access used by the resolvers and the rebaser.

    Both operations raise OSError on failure; callers turn that into
    a plain "not found".
    """

    def read_text(self, path: PathLike) -> str:
        ...

    def list_directory(self, path: PathLike) -> List[DirEntryInfo]:
        ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def read_text(self, path: PathLike) -> str:
        with Path(path).open(encoding="utf-8") as f:
            return f.read()

    def list_directory(self, path: PathLike) -> List[DirEntryInfo]:
        out: List[DirEntryInfo] = []
        with os.scandir(path) as it:
            for entry in it:
                # is_file()/is_dir() follow symlinks; broken links are neither
                out.append(DirEntryInfo(entry.name, entry.is_file(), entry.is_dir()))
        return out


__all__ = ["DirEntryInfo", "FileSystem", "LocalFileSystem", "PathLike"]
