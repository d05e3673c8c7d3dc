"""
Pytest fixtures that lay out icon themes on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from icontheme.core.icons import Icons
from icontheme.core.search import IconSearch

DirSpec = Tuple[str, Dict[str, object]]


def write_theme(
    base: Path,
    name: str,
    directories: Sequence[DirSpec],
    files: Optional[Dict[str, Iterable[str]]] = None,
    inherits: Sequence[str] = (),
    display_name: Optional[str] = None,
) -> Path:
    """Create ``base/name/index.theme`` plus empty icon files."""
    theme_dir = base / name
    theme_dir.mkdir(parents=True, exist_ok=True)
    lines: List[str] = ["[Icon Theme]", f"Name={display_name or name}", "Comment=test theme"]
    if inherits:
        lines.append("Inherits=" + ",".join(inherits))
    lines.append("Directories=" + ",".join(d for d, _ in directories))
    for dir_name, meta in directories:
        lines.append("")
        lines.append(f"[{dir_name}]")
        for key, value in meta.items():
            lines.append(f"{key}={value}")
    (theme_dir / "index.theme").write_text("\n".join(lines) + "\n", encoding="utf-8")

    for dir_name, names in (files or {}).items():
        folder = theme_dir / dir_name
        folder.mkdir(parents=True, exist_ok=True)
        for file_name in names:
            (folder / file_name).write_bytes(b"")
    return theme_dir


@pytest.fixture
def make_theme():
    return write_theme


@pytest.fixture
def icon_dirs(tmp_path: Path) -> Tuple[Path, Path]:
    """Three themes (TestTheme -> OtherTheme -> hicolor) and one standalone icon.

    TestTheme directories, in index order:
      0 16x16/apps     Fixed 16        happy.png, sad.png
      1 32x32/apps     Fixed 32        happy.png
      2 scalable/apps  Scalable 8-512  happy.svg, calm.svg
      3 16x16@2/apps   Fixed 16 @2     (empty)
    """
    base = tmp_path / "icons"
    pixmaps = tmp_path / "pixmaps"
    write_theme(
        base,
        "TestTheme",
        [
            ("16x16/apps", {"Size": 16, "Type": "Fixed", "Context": "Applications"}),
            ("32x32/apps", {"Size": 32, "Type": "Fixed", "Context": "Applications"}),
            ("scalable/apps", {"Size": 64, "MinSize": 8, "MaxSize": 512, "Type": "Scalable"}),
            ("16x16@2/apps", {"Size": 16, "Scale": 2, "Type": "Fixed"}),
        ],
        files={
            "16x16/apps": ["happy.png", "sad.png"],
            "32x32/apps": ["happy.png"],
            "scalable/apps": ["happy.svg", "calm.svg"],
        },
        inherits=["OtherTheme"],
        display_name="Test Theme",
    )
    write_theme(
        base,
        "OtherTheme",
        [("48x48/apps", {"Size": 48, "Type": "Fixed"})],
        files={"48x48/apps": ["happy.png", "other.png", "README.txt"]},
    )
    write_theme(
        base,
        "hicolor",
        [("48x48/apps", {"Size": 48})],
        files={"48x48/apps": ["happy.png", "hicolor-only.png"]},
        display_name="Hicolor",
    )
    pixmaps.mkdir(parents=True)
    (pixmaps / "standalone.png").write_bytes(b"")
    return base, pixmaps


@pytest.fixture
def icon_search(icon_dirs) -> IconSearch:
    base, pixmaps = icon_dirs
    return IconSearch(dirs=[base], standalone_dirs=[base, pixmaps])


@pytest.fixture
def icons(icon_search: IconSearch) -> Icons:
    return icon_search.search()
