from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

from .config import RebaserConfig, find_config, load_config
from .discovery import iter_entry_stylesheets
from .errors import RebaserUserError, StylesheetNotFoundError
from .session import RebaseSession
from .urls import path_to_file_url
from .version import tool_version


def _dumps(obj: Any) -> str:
    """Compact JSON for CLI answers; no trailing newline (the CLI decides)."""
    return json.dumps(obj, ensure_ascii=False)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rebaser",
        description="Sass import resolution and url() rebasing",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument(
        "--config",
        metavar="PATH",
        help="path to rebaser.yaml (default: nearest rebaser.yaml from the current directory)",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level of the rebaser logger",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_resolve = sub.add_parser("resolve", help="Resolve an import specifier (JSON)")
    sp_resolve.add_argument("specifier", help="specifier as written in the @import/@use rule")
    sp_resolve.add_argument(
        "--from",
        dest="from_file",
        metavar="FILE",
        help="stylesheet containing the rule (default: a stylesheet in the current directory)",
    )
    sp_resolve.add_argument(
        "--use",
        action="store_true",
        help="resolve as an @use/@forward rule (import-only files are ignored)",
    )

    sp_load = sub.add_parser("load", help="Print a stylesheet with rebased url() references")
    sp_load.add_argument("file", help="stylesheet to load")
    sp_load.add_argument(
        "--entry",
        metavar="FILE",
        help="entry stylesheet the URLs are rebased onto (default: FILE itself)",
    )
    sp_load.add_argument(
        "--json",
        action="store_true",
        help="print contents, syntax and the intermediate source map as JSON",
    )

    sp_graph = sub.add_parser("graph", help="Import graph of an entry stylesheet (JSON)")
    sp_graph.add_argument("entry", help="entry stylesheet")

    sub.add_parser("list", help="Entry stylesheets selected by the config (JSON)")

    return p


def _load_cfg(ns: argparse.Namespace) -> RebaserConfig:
    cfg_path = Path(ns.config) if ns.config else find_config(Path.cwd())
    return load_config(cfg_path)


def _cmd_resolve(ns: argparse.Namespace, cfg: RebaserConfig) -> Dict[str, Any]:
    importing = Path(ns.from_file) if ns.from_file else Path.cwd() / "index.scss"
    session = RebaseSession(importing, cfg)
    canonical = session.resolve_from(ns.specifier, importing, from_import=not ns.use)
    return {"specifier": ns.specifier, "canonical": canonical}


def _cmd_load(ns: argparse.Namespace, cfg: RebaserConfig) -> str:
    file = Path(ns.file)
    entry = Path(ns.entry) if ns.entry else file
    if ns.json and not cfg.source_maps:
        cfg = replace(cfg, source_maps=True)
    session = RebaseSession(entry, cfg)

    url = path_to_file_url(file)
    result = session.load(url)
    if result is None:
        raise StylesheetNotFoundError(str(file))

    if not ns.json:
        return result.contents

    position_map = session.source_maps.get(url) if session.source_maps is not None else None
    data: Dict[str, Any] = {
        "url": result.source_map_url,
        "syntax": result.syntax.value,
        "contents": result.contents,
        "source_map": position_map.to_source_map(url) if position_map is not None else None,
    }
    return _dumps(data)


def main(argv: Optional[list[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)

    logging.basicConfig(format="[%(levelname)s] %(message)s")
    logging.getLogger("rebaser").setLevel(ns.log_level)

    try:
        cfg = _load_cfg(ns)

        if ns.cmd == "resolve":
            sys.stdout.write(_dumps(_cmd_resolve(ns, cfg)))
            return 0

        if ns.cmd == "load":
            sys.stdout.write(_cmd_load(ns, cfg))
            return 0

        if ns.cmd == "graph":
            graph = RebaseSession(Path(ns.entry), cfg).graph()
            sys.stdout.write(_dumps(graph.to_dict()))
            return 0

        if ns.cmd == "list":
            root = cfg.base_dir
            entries = [p.relative_to(root).as_posix() for p in iter_entry_stylesheets(root, cfg)]
            sys.stdout.write(_dumps({"entries": entries}))
            return 0

    except RebaserUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
