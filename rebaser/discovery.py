from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional

import pathspec

from .config import RebaserConfig


def build_spec(patterns: Iterable[str]) -> Optional[pathspec.PathSpec]:
    """PathSpec from gitwildmatch lines; None when no pattern is given."""
    lines = [ln.strip() for ln in patterns if ln.strip() and not ln.strip().startswith("#")]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, lines)


def iter_entry_stylesheets(root: Path, cfg: RebaserConfig) -> List[Path]:
    """
    Entry stylesheets under root selected by cfg.sources.

    Directories matched by cfg.exclude are pruned before descending.
    Returns a sorted list of absolute paths.
    """
    root = root.resolve()
    spec_sources = build_spec(cfg.sources)
    spec_exclude = build_spec(cfg.exclude)
    if spec_sources is None:
        return []

    out: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        # Early pruning (in-place modification of dirnames)
        if spec_exclude is not None:
            keep: List[str] = []
            for d in dirnames:
                rel_dir = Path(dirpath, d).relative_to(root).as_posix()
                if not spec_exclude.match_file(rel_dir + "/"):
                    keep.append(d)
            dirnames[:] = keep

        for fn in filenames:
            p = Path(dirpath, fn)
            rel_posix = p.relative_to(root).as_posix()
            if spec_exclude is not None and spec_exclude.match_file(rel_posix):
                continue
            if spec_sources.match_file(rel_posix):
                out.append(p)

    out.sort()
    return out


__all__ = ["build_spec", "iter_entry_stylesheets"]
