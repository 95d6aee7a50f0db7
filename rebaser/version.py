from __future__ import annotations

from importlib import metadata


def tool_version() -> str:
    """Installed package version; does not import other modules (avoids cycles)."""
    try:
        return metadata.version("stylesheet-rebaser")
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["tool_version"]
