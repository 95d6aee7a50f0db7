"""
Packed module specifiers.

Sass does not tell an importer which stylesheet contains the rule being
resolved. To resolve package specifiers relative to their importer, the
rebaser rewrites them into

    <marker>;<resolve directory>;<original specifier>

before the compiler sees them. The module importer unpacks the value in
canonicalize. This is an internal protocol between the two, not a format
for users to write by hand.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

DEFAULT_MARKER = "__REBASER_PACKAGE__"

# Characters that must be escaped inside url() and quoted strings
# https://developer.mozilla.org/en-US/docs/Web/CSS/url#syntax
_URL_SPECIAL = re.compile(r"""[()\s'"]""")
_ESCAPED = re.compile(r"\\(.)", re.DOTALL)


@dataclass(frozen=True)
class PackedSpecifier:
    specifier: str
    resolve_dir: Optional[str] = None


def escape_url_chars(value: str) -> str:
    """Normalize path separators and backslash-escape url() special characters."""
    return _URL_SPECIAL.sub(lambda m: "\\" + m.group(0), value.replace("\\", "/"))


def pack_module_specifier(specifier: str, resolve_dir: str, marker: str = DEFAULT_MARKER) -> str:
    packed = f"{marker};{resolve_dir};{specifier}"
    return escape_url_chars(packed)


def is_packed(value: str, marker: str = DEFAULT_MARKER) -> bool:
    return value.startswith(f"{marker};")


def unpack_module_specifier(value: str, marker: str = DEFAULT_MARKER) -> PackedSpecifier:
    """
    Recover the original specifier and its resolve directory.

    Values without the marker are returned as-is with no directory.
    Escapes are removed here as well: depending on the compiler the value
    arrives either verbatim or already unescaped, and packing leaves no
    literal backslashes behind.
    """
    if not is_packed(value, marker):
        return PackedSpecifier(specifier=value)

    unescaped = _ESCAPED.sub(r"\1", value)
    _, resolve_dir, specifier = unescaped.split(";", 2)
    return PackedSpecifier(specifier=specifier, resolve_dir=resolve_dir)


__all__ = [
    "DEFAULT_MARKER",
    "PackedSpecifier",
    "escape_url_chars",
    "pack_module_specifier",
    "is_packed",
    "unpack_module_specifier",
]
