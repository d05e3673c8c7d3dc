"""Package version for ``icontheme --version``."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path

__all__ = ["__version__", "get_version"]

DIST_NAME = "icontheme"
_UNKNOWN = "0.dev0"


def _read_version() -> str:
    # a source checkout has VERSION next to the package; wheels only carry metadata
    version_file = Path(__file__).resolve().parent.parent / "VERSION"
    try:
        text = version_file.read_text(encoding="utf-8").strip()
    except OSError:
        text = ""
    if text:
        return text
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return _UNKNOWN


__version__ = _read_version()


def get_version() -> str:
    return __version__
