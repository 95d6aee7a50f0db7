"""
Lexical scanner for stylesheet sources.

Finds the two kinds of spans the rebaser rewrites:
- arguments of url() functions
- quoted specifiers of @import, @use and @forward rules

The scanner knows nothing about Sass semantics. It only skips comments
and string literals so that text inside them is never reported.
Unquoted indented-syntax imports (``@import foo``) are not reported.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Protocol, Union, runtime_checkable

from .types import ImportSpan, UrlSpan

Span = Union[UrlSpan, ImportSpan]


@runtime_checkable
class Scanner(Protocol):
    """Source of rewritable spans; results are ascending by start."""

    def find_urls(self, text: str, line_comments: bool = True) -> Iterator[UrlSpan]:
        ...

    def find_imports(self, text: str, line_comments: bool = True) -> Iterator[ImportSpan]:
        ...


class StylesheetLexer:
    """
    Single-pass scanner over stylesheet text.

    Reports url() arguments and rule specifiers in source order.
    Plain CSS has no line comments, so `//` handling can be turned off.
    """

    _RULE_PATTERN = re.compile(r'@(import|use|forward)(?![\w-])')
    _IDENT_CHAR = re.compile(r'[\w-]')
    _QUOTES = ('"', "'")

    def __init__(self, text: str, line_comments: bool = True):
        self.text = text
        self.length = len(text)
        self.line_comments = line_comments

    def scan(self) -> Iterator[Span]:
        text = self.text
        pos = 0
        while pos < self.length:
            ch = text[pos]

            if text.startswith("/*", pos):
                end = text.find("*/", pos + 2)
                pos = self.length if end < 0 else end + 2
                continue

            if self.line_comments and text.startswith("//", pos):
                end = text.find("\n", pos)
                pos = self.length if end < 0 else end + 1
                continue

            if ch in self._QUOTES:
                pos = self._skip_string(pos)
                continue

            if ch == "\\":
                pos += 2
                continue

            if ch in "uU" and text[pos:pos + 4].lower() == "url(" and not self._ident_before(pos):
                span, pos = self._read_url(pos + 4)
                if span is not None:
                    yield span
                continue

            if ch == "@":
                m = self._RULE_PATTERN.match(text, pos)
                if m:
                    spans, pos = self._read_rule(m.end(), m.group(1))
                    yield from spans
                    continue

            pos += 1

    # -------------------------------------------------------------- helpers

    def _ident_before(self, pos: int) -> bool:
        return pos > 0 and bool(self._IDENT_CHAR.match(self.text[pos - 1]))

    def _skip_string(self, pos: int) -> int:
        """Position just after the string literal starting at pos."""
        return self._string_end(pos) + 1

    def _string_end(self, pos: int) -> int:
        """
        Index of the closing quote of the string starting at pos.

        An unterminated string ends at the line break (or end of text).
        """
        quote = self.text[pos]
        i = pos + 1
        while i < self.length:
            ch = self.text[i]
            if ch == "\\":
                i += 2
                continue
            if ch == quote or ch == "\n":
                return i
            i += 1
        return self.length

    def _skip_whitespace(self, pos: int) -> int:
        while pos < self.length and self.text[pos].isspace():
            pos += 1
        return pos

    def _read_url(self, pos: int):
        """
        Read a url() argument; pos points just after the opening parenthesis.

        Returns:
            (UrlSpan or None, position to resume scanning)
        """
        text = self.text
        start = self._skip_whitespace(pos)
        if start >= self.length:
            return None, self.length

        if text[start] in self._QUOTES:
            close = self._string_end(start)
            if close >= self.length or text[close] != text[start]:
                return None, close
            return UrlSpan(start + 1, close, text[start + 1:close]), close + 1

        i = start
        while i < self.length:
            ch = text[i]
            if ch == "\\":
                i += 2
                continue
            if ch == ")":
                value = text[start:i].rstrip()
                return UrlSpan(start, start + len(value), value), i + 1
            if ch in self._QUOTES or ch == "(":
                # Not a plain url token (e.g. url(foo("x"))): leave it alone
                return None, i
            i += 1
        return None, self.length

    def _read_rule(self, pos: int, rule: str):
        """
        Read the quoted specifiers following a rule keyword.

        @import accepts a comma separated list; @use and @forward take one.

        Returns:
            (list of ImportSpan, position to resume scanning)
        """
        text = self.text
        spans: List[ImportSpan] = []
        while True:
            pos = self._skip_whitespace(pos)
            if pos >= self.length or text[pos] not in self._QUOTES:
                return spans, pos

            close = self._string_end(pos)
            if close >= self.length or text[close] != text[pos]:
                return spans, close
            spans.append(ImportSpan(pos, close + 1, text[pos + 1:close], rule))
            pos = close + 1

            if rule != "import":
                return spans, pos
            pos = self._skip_whitespace(pos)
            if pos < self.length and text[pos] == ",":
                pos += 1
                continue
            return spans, pos


def find_urls(text: str, line_comments: bool = True) -> Iterator[UrlSpan]:
    """All url() arguments in text, ascending by start."""
    for span in StylesheetLexer(text, line_comments).scan():
        if isinstance(span, UrlSpan):
            yield span


def find_imports(text: str, line_comments: bool = True) -> Iterator[ImportSpan]:
    """All quoted @import/@use/@forward specifiers in text, ascending by start."""
    for span in StylesheetLexer(text, line_comments).scan():
        if isinstance(span, ImportSpan):
            yield span


class LexicalScanner:
    """Default Scanner implementation backed by StylesheetLexer."""

    def find_urls(self, text: str, line_comments: bool = True) -> Iterator[UrlSpan]:
        return find_urls(text, line_comments)

    def find_imports(self, text: str, line_comments: bool = True) -> Iterator[ImportSpan]:
        return find_imports(text, line_comments)


__all__ = [
    "Scanner",
    "StylesheetLexer",
    "LexicalScanner",
    "find_urls",
    "find_imports",
]
