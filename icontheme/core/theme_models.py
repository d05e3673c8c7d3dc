from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
import os
from typing import Optional, Tuple

DEFAULT_THRESHOLD = 2


class DirectoryType(str, Enum):
    FIXED = "Fixed"
    SCALABLE = "Scalable"
    THRESHOLD = "Threshold"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "DirectoryType":
        value = (raw or "").strip().lower()
        for member in cls:
            if member.value.lower() == value:
                return member
        return cls.THRESHOLD


class FileType(str, Enum):
    PNG = "png"
    SVG = "svg"
    XPM = "xpm"

    @classmethod
    def from_path(cls, path: Path) -> Optional["FileType"]:
        # case sensitive, lookups build "<name>.png" etc.
        suffix = path.suffix[1:]
        for member in cls:
            if member.value == suffix:
                return member
        return None


# lookup order when a directory holds the same icon in several formats
FILE_TYPES: Tuple[FileType, ...] = (FileType.PNG, FileType.SVG, FileType.XPM)

_SEPARATORS = {"/", os.sep, os.altsep or "/", "\0"}


def is_icon_name(icon_name: str) -> bool:
    """True for a bare icon name: not empty, no path separator, not ``.`` or ``..``."""
    if not icon_name or icon_name in (".", ".."):
        return False
    return not any(sep in icon_name for sep in _SEPARATORS)


@dataclass(frozen=True)
class DirectoryRef:
    """Position of a directory inside the directory list of one theme.

    Only the theme named ``theme`` can resolve it; see ``Theme.directory``.
    """
    theme: str
    index: int


@dataclass(frozen=True, eq=False)
class Directory:
    """A sub-directory entry of ``index.theme``.

    Compared by identity: two entries with the same metadata are still
    different directories.
    """
    name: str
    size: int
    scale: int = 1
    type: DirectoryType = DirectoryType.THRESHOLD
    min_size: Optional[int] = None
    max_size: Optional[int] = None
    threshold: int = DEFAULT_THRESHOLD
    context: Optional[str] = None

    @property
    def effective_min_size(self) -> int:
        return self.size if self.min_size is None else self.min_size

    @property
    def effective_max_size(self) -> int:
        return self.size if self.max_size is None else self.max_size

    def matches_size(self, size: int, scale: int) -> bool:
        if self.scale != scale:
            return False
        if self.type is DirectoryType.FIXED:
            return self.size == size
        if self.type is DirectoryType.SCALABLE:
            return self.effective_min_size <= size <= self.effective_max_size
        return self.size - self.threshold <= size <= self.size + self.threshold

    def size_distance(self, size: int, scale: int) -> int:
        wanted = size * scale
        if self.type is DirectoryType.FIXED:
            return abs(self.size * self.scale - wanted)

        low = self.effective_min_size * self.scale
        high = self.effective_max_size * self.scale
        if self.type is DirectoryType.SCALABLE:
            if wanted < low:
                return low - wanted
            if wanted > high:
                return wanted - high
            return 0

        # Threshold: bounds come from size +/- threshold, distance from min/max size
        if wanted < (self.size - self.threshold) * self.scale:
            return max(low - wanted, 0)
        if wanted > (self.size + self.threshold) * self.scale:
            return max(wanted - high, 0)
        return 0


@dataclass(frozen=True)
class IconFile:
    path: Path
    file_type: FileType

    @property
    def icon_name(self) -> str:
        return self.path.stem

    @staticmethod
    def from_path(path: Path) -> Optional["IconFile"]:
        """Return an ``IconFile`` for ``path`` if its extension is a known icon format."""
        file_type = FileType.from_path(path)
        if file_type is None:
            return None
        return IconFile(Path(path), file_type)

    def __str__(self) -> str:
        return str(self.path)
