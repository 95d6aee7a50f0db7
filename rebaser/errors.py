"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from RebaserUserError.

A missing stylesheet is not an error: resolvers report it as ``None``
so the host compiler can try its next importer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


class RebaserUserError(Exception):
    """
    Base class for all user-facing errors of the rebaser.

    These errors indicate problems that the user can fix:
    ambiguous stylesheet names, invalid configuration, etc.
    """
    pass


@dataclass
class AmbiguousImportError(RebaserUserError):
    """More than one stylesheet file matches an import specifier."""
    url: str
    candidates: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"Ambiguous import detected: '{self.url}' matches "
            f"{', '.join(self.candidates)}"
        )


class StylesheetNotFoundError(RebaserUserError):
    """An entry stylesheet given by the user cannot be resolved."""
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Stylesheet not found: {path}")


class ConfigError(RebaserUserError):
    """Invalid or unsupported rebaser.yaml."""
    pass


__all__ = [
    "RebaserUserError",
    "AmbiguousImportError",
    "StylesheetNotFoundError",
    "ConfigError",
]
