from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple
import os

from .theme_index import ThemeIndex
from .theme_models import FILE_TYPES, Directory, DirectoryRef, FileType, IconFile, is_icon_name


@dataclass(frozen=True)
class ThemeInfo:
    internal_name: str
    base_dirs: Tuple[Path, ...]
    index: ThemeIndex

    @property
    def display_name(self) -> str:
        return self.index.name


@dataclass(frozen=True, eq=False)
class Theme:
    """An icon theme plus its (flattened) inheritance chain.

    Immutable and shared: parents are referenced, never copied.
    ``inherits_from`` is ordered first-match-wins and already contains the
    parents of parents, so callers only ever need each theme's local lookup.
    """
    info: ThemeInfo
    inherits_from: Tuple["Theme", ...] = ()

    @property
    def internal_name(self) -> str:
        return self.info.internal_name

    @property
    def directories(self) -> Tuple[Directory, ...]:
        return self.info.index.directories

    def directory(self, ref: DirectoryRef) -> Directory:
        if ref.theme != self.internal_name:
            raise ValueError(
                f"directory reference of theme {ref.theme!r} used with theme {self.internal_name!r}"
            )
        return self.directories[ref.index]

    def directory_ref(self, index: int) -> DirectoryRef:
        return DirectoryRef(self.internal_name, index)

    # ---------- enumeration ----------
    def find_icon_files(self, icon_name: str) -> Iterator[Tuple[DirectoryRef, IconFile]]:
        """Yield every file named ``icon_name`` in this theme (no parents).

        Order: directories as listed in the index, then base dirs, then
        file types (png, svg, xpm).
        """
        if not is_icon_name(icon_name):
            return
        for i, directory in enumerate(self.directories):
            for base in self.info.base_dirs:
                folder = base / directory.name
                for file_type in FILE_TYPES:
                    path = folder / f"{icon_name}.{file_type.value}"
                    if path.is_file():
                        yield self.directory_ref(i), IconFile(path, file_type)

    def iter_all_icons(self) -> Iterator[Tuple[Directory, IconFile]]:
        """Yield every icon file of this theme.

        For any single icon name the relative order equals ``find_icon_files``.
        """
        for directory in self.directories:
            for base in self.info.base_dirs:
                for icon in _scan_folder(base / directory.name):
                    yield directory, icon

    # ---------- uncached lookup ----------
    def find_icon_here(self, icon_name: str, size: int, scale: int) -> Optional[IconFile]:
        candidates = list(self.find_icon_files(icon_name))
        for ref, icon in candidates:
            if self.directory(ref).matches_size(size, scale):
                return icon

        best: Optional[IconFile] = None
        best_distance = None
        for ref, icon in candidates:
            distance = self.directory(ref).size_distance(size, scale)
            if best_distance is None or distance < best_distance:
                best, best_distance = icon, distance
        return best

    def find_icon(self, icon_name: str, size: int, scale: int) -> Optional[IconFile]:
        icon = self.find_icon_here(icon_name, size, scale)
        if icon is not None:
            return icon
        for parent in self.inherits_from:
            icon = parent.find_icon_here(icon_name, size, scale)
            if icon is not None:
                return icon
        return None

    def __repr__(self) -> str:
        parents = ", ".join(p.internal_name for p in self.inherits_from)
        return f"Theme({self.internal_name!r}, inherits_from=[{parents}])"


def _scan_folder(folder: Path) -> List[IconFile]:
    try:
        with os.scandir(folder) as it:
            entries = [Path(entry.path) for entry in it if entry.is_file()]
    except OSError:
        return []
    order: Dict[FileType, int] = {ft: i for i, ft in enumerate(FILE_TYPES)}
    icons = [icon for icon in (IconFile.from_path(p) for p in entries) if icon is not None]
    icons.sort(key=lambda icon: (icon.icon_name, order[icon.file_type]))
    return icons
