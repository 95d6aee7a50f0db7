from __future__ import annotations

from pathlib import Path

from rebaser.config import RebaserConfig
from rebaser.discovery import build_spec, iter_entry_stylesheets
from tests.infrastructure.file_utils import write_tree


def _rel(root: Path, paths):
    return [p.relative_to(root.resolve()).as_posix() for p in paths]


def _tree(root: Path) -> Path:
    return write_tree(root, {
        "src/main.scss": "",
        "src/print.sass": "",
        "src/_partial.scss": "",
        "src/theme/dark.scss": "",
        "src/theme/_vars.scss": "",
        "src/plain.css": "",
        "node_modules/pkg/index.scss": "",
        ".git/x.scss": "",
        "build/out.scss": "",
    })


def test_default_selection(tmp_path: Path):
    _tree(tmp_path)
    found = iter_entry_stylesheets(tmp_path, RebaserConfig(base_dir=tmp_path))
    assert _rel(tmp_path, found) == [
        "build/out.scss",
        "src/main.scss",
        "src/print.sass",
        "src/theme/dark.scss",
    ]


def test_custom_sources_and_exclude(tmp_path: Path):
    _tree(tmp_path)
    cfg = RebaserConfig(sources=("src/**/*.scss", "!**/_*"), exclude=("theme/",), base_dir=tmp_path)
    assert _rel(tmp_path, iter_entry_stylesheets(tmp_path, cfg)) == ["src/main.scss"]


def test_excluded_files(tmp_path: Path):
    _tree(tmp_path)
    cfg = RebaserConfig(exclude=("node_modules/", ".git/", "build/", "print.sass"), base_dir=tmp_path)
    assert _rel(tmp_path, iter_entry_stylesheets(tmp_path, cfg)) == [
        "src/main.scss",
        "src/theme/dark.scss",
    ]


def test_no_sources(tmp_path: Path):
    _tree(tmp_path)
    assert iter_entry_stylesheets(tmp_path, RebaserConfig(sources=(), base_dir=tmp_path)) == []


def test_build_spec_skips_comments_and_blanks():
    assert build_spec(["", "  ", "# comment"]) is None
    spec = build_spec(["*.scss", "# comment", "!_*"])
    assert spec is not None
    assert spec.match_file("a.scss")
    assert not spec.match_file("_a.scss")
