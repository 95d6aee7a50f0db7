from __future__ import annotations

from pathlib import Path

from rebaser.importers import bind_importer, importer_callbacks
from tests.infrastructure.file_utils import file_url


def test_detached_callbacks_work(styles: Path, make_relative):
    imp = bind_importer(make_relative(styles / "src"))
    canonicalize = imp.canonicalize
    load = imp.load

    url = canonicalize(file_url(styles / "src" / "theme" / "colors"), True)
    assert url == file_url(styles / "src" / "theme" / "_colors.scss")
    result = load(url)
    assert result is not None and result.contents == "$primary: red;\n"


def test_bound_callables_are_stable(styles: Path, make_relative):
    imp = make_relative(styles / "src")
    assert imp.canonicalize is not imp.canonicalize

    assert bind_importer(imp) is imp
    assert imp.canonicalize is imp.canonicalize
    assert imp.load is imp.load


def test_importer_callbacks(styles: Path, make_relative):
    imp = make_relative(styles / "src")
    callbacks = importer_callbacks(imp)
    assert callbacks.canonicalize is imp.canonicalize
    assert callbacks.load is imp.load

    canonicalize, load = callbacks
    assert canonicalize(file_url(styles / "src" / "main")) == file_url(styles / "src" / "main.scss")
    assert load(file_url(styles / "src" / "main.scss")) is not None


def test_binding_keeps_instance_state(styles: Path, make_relative):
    maps = {}
    imp = bind_importer(make_relative(styles / "src", rebase_source_maps=maps))
    load = imp.load
    load(file_url(styles / "src" / "components" / "_button.scss"))
    assert list(maps) == [file_url(styles / "src" / "components" / "_button.scss")]
