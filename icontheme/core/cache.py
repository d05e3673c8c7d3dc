"""Memoizing versions of ``Icons`` and ``Theme``.

Example::

    cache = IconSearch().search().cached()
    cache.find_icon("firefox", 128, 1, "Adwaita")
    # later queries for "firefox" at any size/scale reuse the cached files
"""

from __future__ import annotations

import logging
import os
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Set, Tuple

from .icons import DEFAULT_THEME, Icons
from .theme import Theme
from .theme_models import DirectoryRef, IconFile, is_icon_name

_LOGGER = logging.getLogger(__name__)

Candidate = Tuple[DirectoryRef, IconFile]


def _key(icon_name: str) -> bytes:
    # file names need not be valid UTF-8; fsencode round-trips surrogates
    return os.fsencode(icon_name)


class ThemeCache:
    """Caching version of ``Theme``.

    Keeps, per icon name, every (directory, file) pair of the theme so that
    later lookups for the same name at any size/scale skip the directory scan.
    """

    def __init__(self, theme: Theme):
        self._theme = theme
        self._cache: Dict[bytes, List[Candidate]] = {}

    @classmethod
    def from_theme(cls, theme: Theme) -> "ThemeCache":
        return cls(theme)

    @property
    def theme(self) -> Theme:
        return self._theme

    def find_icon(self, icon_name: str, size: int, scale: int) -> Optional[IconFile]:
        """Find an icon in this theme or any theme it inherits from.

        Parents are searched with their own uncached ``find_icon_here``.
        No standalone fallback here, that belongs to ``IconsCache``.
        """
        icon = self.find_icon_here(icon_name, size, scale)
        if icon is not None:
            return icon
        for parent in self._theme.inherits_from:
            icon = parent.find_icon_here(icon_name, size, scale)
            if icon is not None:
                return icon
        return None

    # Keep in sync with Theme.find_icon_here: results must be identical.
    def find_icon_here(self, icon_name: str, size: int, scale: int) -> Optional[IconFile]:
        """Find an icon in this theme only, populating the cache on first use."""
        key = _key(icon_name)
        icon_files = self._cache.get(key)
        if icon_files is None:
            # pay for the full scan once; misses are cached too
            icon_files = list(self._theme.find_icon_files(icon_name))
            self._cache[key] = icon_files

        for ref, icon in icon_files:
            if self._theme.directory(ref).matches_size(size, scale):
                return icon

        best: Optional[IconFile] = None
        best_distance = None
        for ref, icon in icon_files:
            distance = self._theme.directory(ref).size_distance(size, scale)
            if best_distance is None or distance < best_distance:
                best, best_distance = icon, distance
        return best

    def clear_cache(self) -> None:
        self._cache.clear()

    def is_cached(self, icon_name: str) -> bool:
        return _key(icon_name) in self._cache

    def candidates(self, icon_name: str) -> Optional[List[Candidate]]:
        """Cached (directory, file) pairs for ``icon_name``, or ``None`` if not cached."""
        cached = self._cache.get(_key(icon_name))
        return None if cached is None else list(cached)

    def __len__(self) -> int:
        return len(self._cache)

    def __repr__(self) -> str:
        return f"ThemeCache({self._theme.internal_name!r}, entries={len(self._cache)})"


class IconsCache:
    """Caching version of ``Icons``.

    Holds one ``ThemeCache`` per theme of the wrapped ``Icons``. The set of
    theme names always equals ``icons.themes``: it is fixed at construction
    and only read-only views are handed out.
    """

    def __init__(self, icons: Icons):
        self._icons = icons
        self._themes: Dict[str, ThemeCache] = {
            name: ThemeCache.from_theme(theme) for name, theme in icons.themes.items()
        }

    @classmethod
    def from_icons(cls, icons: Icons) -> "IconsCache":
        return cls(icons)

    @property
    def icons(self) -> Icons:
        return self._icons

    @property
    def themes(self) -> Mapping[str, ThemeCache]:
        return MappingProxyType(self._themes)

    def theme_cache(self, theme_name: str) -> Optional[ThemeCache]:
        return self._themes.get(theme_name)

    def find_default_icon(self, icon_name: str, size: int, scale: int) -> Optional[IconFile]:
        return self.find_icon(icon_name, size, scale, DEFAULT_THEME)

    def find_icon(self, icon_name: str, size: int, scale: int, theme: str) -> Optional[IconFile]:
        """Caching version of ``Icons.find_icon``; same matching rules."""
        if not is_icon_name(icon_name):
            return None

        theme_cache = self._themes.get(theme)
        if theme_cache is None:
            theme_cache = self._themes.get(DEFAULT_THEME)
            if theme_cache is None:
                return None

        icon = theme_cache.find_icon(icon_name, size, scale)
        if icon is not None:
            return icon
        return self.find_standalone_icon(icon_name)

    def find_standalone_icon(self, icon_name: str) -> Optional[IconFile]:
        return self._icons.find_standalone_icon(icon_name)

    def pre_populate_cache(self) -> int:
        """Fill every theme cache from a single ``Icons.find_all_icons`` walk.

        Worth it when most icons will be loaded anyway. Names cached before
        the call are left as they are. Returns the number of files added.
        """
        complete: Dict[str, Set[bytes]] = {
            name: set(tc._cache) for name, tc in self._themes.items()
        }
        positions: Dict[str, Dict[int, int]] = {}
        added = 0

        for theme, directory, icon in self._icons.find_all_icons():
            name = theme.internal_name
            theme_cache = self._themes.get(name)
            if theme_cache is None:
                _LOGGER.warning("Skipping icon of theme %r without a cache entry", name)
                continue

            index_of = positions.get(name)
            if index_of is None:
                index_of = {id(d): i for i, d in enumerate(theme_cache.theme.directories)}
                positions[name] = index_of
            index = index_of.get(id(directory))
            if index is None or theme_cache.theme.directories[index] is not directory:
                _LOGGER.warning(
                    "Directory %r not found in theme %r, skipping %s", directory.name, name, icon
                )
                continue

            key = _key(icon.icon_name)
            if key in complete[name]:
                continue
            theme_cache._cache.setdefault(key, []).append((theme_cache.theme.directory_ref(index), icon))
            added += 1

        _LOGGER.debug("Pre-populated %d icon files across %d themes", added, len(self._themes))
        return added

    def clear_cache(self) -> None:
        for theme_cache in self._themes.values():
            theme_cache.clear_cache()

    def __repr__(self) -> str:
        return f"IconsCache(themes={sorted(self._themes)})"
