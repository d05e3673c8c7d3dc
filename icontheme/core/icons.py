from __future__ import annotations
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from .theme import Theme
from .theme_models import FILE_TYPES, Directory, IconFile, is_icon_name

if TYPE_CHECKING:  # pragma: no cover
    from .cache import IconsCache

DEFAULT_THEME = "hicolor"


class Icons:
    """Result of an icon search: every known theme plus the standalone icon dirs.

    Lookups here are uncached; see ``IconsCache`` for the memoizing variant.
    """

    def __init__(self, themes: Mapping[str, Theme], standalone_dirs: Iterable[Path] = ()):
        self._themes: Dict[str, Theme] = dict(themes)
        self.standalone_dirs: Tuple[Path, ...] = tuple(Path(p) for p in standalone_dirs)

    @property
    def themes(self) -> Mapping[str, Theme]:
        return MappingProxyType(self._themes)

    def theme(self, theme_name: str) -> Optional[Theme]:
        return self._themes.get(theme_name)

    def find_default_icon(self, icon_name: str, size: int, scale: int) -> Optional[IconFile]:
        return self.find_icon(icon_name, size, scale, DEFAULT_THEME)

    def find_icon(self, icon_name: str, size: int, scale: int, theme: str) -> Optional[IconFile]:
        """Look up an icon by name, size, scale and theme.

        The theme and its inheritance chain are searched first (an exact
        size match wins, otherwise the closest directory); unknown themes
        fall back to ``hicolor``. If no theme has the icon, standalone icons
        are tried.
        """
        if not is_icon_name(icon_name):
            return None
        found = self._themes.get(theme) or self._themes.get(DEFAULT_THEME)
        if found is None:
            return None
        icon = found.find_icon(icon_name, size, scale)
        if icon is not None:
            return icon
        return self.find_standalone_icon(icon_name)

    def find_standalone_icon(self, icon_name: str) -> Optional[IconFile]:
        if not is_icon_name(icon_name):
            return None
        for folder in self.standalone_dirs:
            for file_type in FILE_TYPES:
                path = folder / f"{icon_name}.{file_type.value}"
                if path.is_file():
                    return IconFile(path, file_type)
        return None

    def find_all_icons(self) -> Iterator[Tuple[Theme, Directory, IconFile]]:
        for theme in self._themes.values():
            for directory, icon in theme.iter_all_icons():
                yield theme, directory, icon

    def cached(self) -> "IconsCache":
        from .cache import IconsCache

        return IconsCache.from_icons(self)

    def __len__(self) -> int:
        return len(self._themes)
