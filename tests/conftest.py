from __future__ import annotations

from pathlib import Path

import pytest

from rebaser.cache import DirectoryCache
from rebaser.importers import RelativeUrlRebasingImporter

from tests.infrastructure.file_utils import write_tree
from tests.infrastructure.fs_utils import CountingFileSystem


@pytest.fixture
def counting_fs() -> CountingFileSystem:
    return CountingFileSystem()


@pytest.fixture
def cache(counting_fs: CountingFileSystem) -> DirectoryCache:
    return DirectoryCache(counting_fs)


@pytest.fixture
def styles(tmp_path: Path) -> Path:
    """Application styles tree: entry in src/, partials and assets around it."""
    return write_tree(tmp_path, {
        "src/main.scss": """
            @import "theme/colors";
            @use "components/button";
            body { background: url(../assets/bg.png); }
        """,
        "src/theme/_colors.scss": "$primary: red;\n",
        "src/components/_button.scss": """
            .btn { background: url("../../assets/icons/btn.svg"); }
        """,
        "assets/bg.png": "",
        "assets/icons/btn.svg": "",
    })


@pytest.fixture
def make_relative(cache: DirectoryCache, counting_fs: CountingFileSystem):
    """Factory: RelativeUrlRebasingImporter over the shared counting cache."""
    def _make(entry_dir: Path, **kwargs) -> RelativeUrlRebasingImporter:
        return RelativeUrlRebasingImporter(entry_dir, cache, fs=counting_fs, **kwargs)
    return _make
