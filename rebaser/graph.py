"""
Stylesheet dependency graph.

GraphBuilder drives a chain of importers the way the Sass compiler does
(canonicalize → load → canonicalize the nested rules) without compiling
anything. It is used to inspect an entry stylesheet's import graph and to
exercise the importers end to end.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .errors import StylesheetNotFoundError
from .fs import PathLike
from .importers.base import UrlRebasingImporter
from .lexer import LexicalScanner, Scanner
from .types import ImportSpan, Syntax
from .urls import path_to_file_url, resolve_relative_url

logger = logging.getLogger(__name__)

# @import rules that Sass leaves to the browser as plain CSS imports
_PLAIN_CSS_IMPORT = re.compile(r"^(?:https?:)?//|\.css$", re.IGNORECASE)

# Sass built-in modules (sass:math, sass:map, ...)
_BUILTIN_PREFIX = "sass:"


@dataclass
class GraphNode:
    url: str
    syntax: Syntax
    imports: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class UnresolvedImport:
    importer: str   # canonical URL of the stylesheet containing the rule
    specifier: str


@dataclass
class StylesheetGraph:
    """Canonical URL → node, plus the rules that did not lead to a stylesheet."""
    entry: str
    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    missing: List[UnresolvedImport] = field(default_factory=list)
    external: List[UnresolvedImport] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry": self.entry,
            "stylesheets": [
                {"url": n.url, "syntax": n.syntax.value, "imports": list(n.imports)}
                for n in self.nodes.values()
            ],
            "missing": [{"importer": m.importer, "specifier": m.specifier} for m in self.missing],
            "external": [{"importer": e.importer, "specifier": e.specifier} for e in self.external],
        }


class GraphBuilder:
    """
    Walks the import graph of an entry stylesheet.

    Each nested rule is first resolved relative to its stylesheet through
    the importer that loaded that stylesheet, then through every importer
    of the chain in order. Already visited stylesheets are not loaded again,
    which also stops import cycles.
    """

    def __init__(self, importers: Sequence[UrlRebasingImporter], scanner: Optional[Scanner] = None):
        if not importers:
            raise ValueError("At least one importer is required")
        self.importers = list(importers)
        self.scanner: Scanner = scanner if scanner is not None else LexicalScanner()

    def build(self, entry_path: PathLike) -> StylesheetGraph:
        """
        Raises:
            StylesheetNotFoundError: If the entry stylesheet cannot be resolved or read
            AmbiguousImportError: If any rule matches several stylesheets
        """
        entry_url = path_to_file_url(entry_path)
        resolved = self._canonicalize_chain(entry_url, from_import=False)
        if resolved is None:
            raise StylesheetNotFoundError(str(entry_path))

        graph = StylesheetGraph(entry=resolved[0])
        pending: List[Tuple[str, UrlRebasingImporter]] = [resolved]

        while pending:
            url, importer = pending.pop()
            if url in graph.nodes:
                continue

            result = importer.load(url)
            if result is None:
                if url == graph.entry:
                    raise StylesheetNotFoundError(str(entry_path))
                logger.debug("Stylesheet %s vanished before load", url)
                continue

            node = GraphNode(url=url, syntax=result.syntax)
            graph.nodes[url] = node

            nested: List[Tuple[str, UrlRebasingImporter]] = []
            line_comments = result.syntax is not Syntax.CSS
            for span in self.scanner.find_imports(result.contents, line_comments):
                if self._is_external(span):
                    graph.external.append(UnresolvedImport(url, span.specifier))
                    continue

                found = self._resolve_nested(url, importer, span)
                if found is None:
                    graph.missing.append(UnresolvedImport(url, span.specifier))
                    continue

                node.imports.append(found[0])
                nested.append(found)

            # Reversed so that rules are visited in source order
            pending.extend(reversed(nested))

        return graph

    @staticmethod
    def _is_external(span: ImportSpan) -> bool:
        """Built-in modules and plain CSS imports are not loaded from disk."""
        if span.specifier.startswith(_BUILTIN_PREFIX):
            return True
        return span.rule == "import" and bool(_PLAIN_CSS_IMPORT.search(span.specifier))

    def _resolve_nested(
        self,
        parent_url: str,
        parent_importer: UrlRebasingImporter,
        span: ImportSpan,
    ) -> Optional[Tuple[str, UrlRebasingImporter]]:
        from_import = span.rule == "import"

        relative = parent_importer.canonicalize(
            resolve_relative_url(parent_url, span.specifier), from_import
        )
        if relative is not None:
            return relative, parent_importer

        return self._canonicalize_chain(span.specifier, from_import)

    def _canonicalize_chain(
        self, specifier: str, from_import: bool
    ) -> Optional[Tuple[str, UrlRebasingImporter]]:
        for importer in self.importers:
            canonical = importer.canonicalize(specifier, from_import)
            if canonical is not None:
                return canonical, importer
        return None


def build_graph(
    entry_path: PathLike,
    importers: Sequence[UrlRebasingImporter],
    *,
    scanner: Optional[Scanner] = None,
) -> StylesheetGraph:
    """Dependency graph of an entry stylesheet through an importer chain."""
    return GraphBuilder(importers, scanner).build(entry_path)


__all__ = [
    "GraphNode",
    "UnresolvedImport",
    "StylesheetGraph",
    "GraphBuilder",
    "build_graph",
]
