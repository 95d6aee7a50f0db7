"""
Shared test infrastructure for the rebaser tests.

Modules:
- file_utils: creating stylesheet trees on disk
- fs_utils: filesystem doubles (call counting, failing reads)
- cli_utils: running the CLI in-process
"""

from .file_utils import file_url, write, write_tree
from .fs_utils import CountingFileSystem, FlakyFileSystem
from .cli_utils import run_cli, jload

__all__ = [
    # File utilities
    "write",
    "write_tree",
    "file_url",

    # Filesystem doubles
    "CountingFileSystem",
    "FlakyFileSystem",

    # CLI
    "run_cli",
    "jload",
]
