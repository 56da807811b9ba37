"""Location of the wrapped executable.

The binary ships next to the installed package:

    <site-packages>/sentry-cli           (POSIX)
    <site-packages>/bin/sentry-cli.exe   (Windows)
"""

from __future__ import annotations

import sys
from pathlib import Path

__all__ = [
    "BINARY_NAME",
    "resolve_default_binary_path",
]

BINARY_NAME = "sentry-cli"

# Directory that contains the cli_invoke package directory
_BASE_DIR = Path(__file__).resolve().parent.parent


def resolve_default_binary_path(
    platform: str | None = None,
    base_dir: Path | str | None = None,
    name: str = BINARY_NAME,
) -> str:
    """Resolve the default absolute path of the wrapped executable.

    Args:
        platform: Platform identifier (defaults to sys.platform)
        base_dir: Directory the relative location is resolved against
        name: Executable base name

    Returns:
        Absolute path as a string
    """
    platform = sys.platform if platform is None else platform
    base = Path(base_dir) if base_dir is not None else _BASE_DIR

    if platform == "win32":
        path = base / "bin" / f"{name}.exe"
    else:
        path = base / name

    return str(path.absolute())
