from __future__ import annotations

import threading
from pathlib import Path

from rebaser.cache import DirectoryCache
from rebaser.importers import RelativeUrlRebasingImporter
from tests.infrastructure.file_utils import file_url, write_tree
from tests.infrastructure.fs_utils import CountingFileSystem, FlakyFileSystem


def test_populate_classifies_entries(tmp_path: Path, cache: DirectoryCache):
    write_tree(tmp_path, {"a.scss": "", "_b.sass": "", "sub/": ""})
    entry = cache.populate(tmp_path)
    assert entry is not None
    assert entry.files == {"a.scss", "_b.sass"}
    assert entry.directories == {"sub"}
    assert cache.get(tmp_path) is entry


def test_get_does_not_touch_filesystem(tmp_path: Path, cache: DirectoryCache, counting_fs: CountingFileSystem):
    assert cache.get(tmp_path) is None
    assert counting_fs.listing_calls == 0


def test_lookup_lists_once(tmp_path: Path, cache: DirectoryCache, counting_fs: CountingFileSystem):
    write_tree(tmp_path, {"a.scss": ""})
    first = cache.lookup(tmp_path)
    second = cache.lookup(tmp_path)
    assert first is second
    assert counting_fs.listing_calls == 1
    assert cache.listings == 1


def test_keys_are_absolute_paths(tmp_path: Path, cache: DirectoryCache, counting_fs: CountingFileSystem):
    write_tree(tmp_path, {"x/a.scss": ""})
    cache.lookup(tmp_path / "x")
    cache.lookup(str(tmp_path / "x" / ".." / "x"))
    assert counting_fs.listing_calls == 1
    assert tmp_path / "x" in cache
    assert len(cache) == 1


def test_missing_directory_is_not_cached(tmp_path: Path, cache: DirectoryCache, counting_fs: CountingFileSystem):
    missing = tmp_path / "later"
    assert cache.lookup(missing) is None
    assert missing not in cache

    # A retry after the directory appears succeeds
    write_tree(tmp_path, {"later/a.scss": ""})
    entry = cache.lookup(missing)
    assert entry is not None and entry.files == {"a.scss"}
    assert counting_fs.listing_calls == 2


def test_listing_failure_is_not_cached(tmp_path: Path):
    fs = FlakyFileSystem()
    fs.unlistable.add(str(tmp_path))
    cache = DirectoryCache(fs)
    assert cache.lookup(tmp_path) is None
    fs.unlistable.clear()
    assert cache.lookup(tmp_path) is not None


def test_empty_listing_is_cached(tmp_path: Path, cache: DirectoryCache, counting_fs: CountingFileSystem):
    assert cache.lookup(tmp_path) is not None
    assert cache.lookup(tmp_path) is not None
    assert counting_fs.listing_calls == 1


def test_clear(tmp_path: Path, cache: DirectoryCache, counting_fs: CountingFileSystem):
    cache.lookup(tmp_path)
    cache.clear()
    assert len(cache) == 0
    cache.lookup(tmp_path)
    assert counting_fs.listing_calls == 2


def test_two_resolutions_one_listing(tmp_path: Path, counting_fs: CountingFileSystem):
    write_tree(tmp_path, {"_a.scss": "", "b.scss": ""})
    cache = DirectoryCache(counting_fs)
    imp = RelativeUrlRebasingImporter(tmp_path, cache, fs=counting_fs)

    assert imp.canonicalize(file_url(tmp_path / "a")) == file_url(tmp_path / "_a.scss")
    assert imp.canonicalize(file_url(tmp_path / "b")) == file_url(tmp_path / "b.scss")
    # Misses in a listed directory are answered from the cache as well
    assert imp.canonicalize(file_url(tmp_path / "c")) is None
    assert counting_fs.listed[str(tmp_path)] == 1


def test_cache_shared_between_importers(tmp_path: Path, counting_fs: CountingFileSystem):
    write_tree(tmp_path, {"_a.scss": ""})
    cache = DirectoryCache(counting_fs)
    first = RelativeUrlRebasingImporter(tmp_path, cache, fs=counting_fs)
    second = RelativeUrlRebasingImporter(tmp_path / "other", cache, fs=counting_fs)

    assert first.canonicalize(file_url(tmp_path / "a")) is not None
    assert second.canonicalize(file_url(tmp_path / "a")) is not None
    assert counting_fs.listing_calls == 1


def test_thread_safe_cache_lists_from_many_threads(tmp_path: Path):
    dirs = []
    for i in range(8):
        d = tmp_path / f"d{i}"
        write_tree(d, {f"_f{i}.scss": ""})
        dirs.append(d)

    cache = DirectoryCache(thread_safe=True)
    errors = []

    def worker():
        try:
            for d in dirs:
                assert cache.lookup(d) is not None
        except AssertionError as e:  # pragma: no cover - surfaced below
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert len(cache) == len(dirs)
    assert sorted(cache) == sorted(str(d) for d in dirs)
