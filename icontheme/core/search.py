from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Set, Tuple
import logging
import os

from .icons import DEFAULT_THEME, Icons
from .theme import Theme, ThemeInfo
from .theme_index import INDEX_FILE, ThemeIndex, ThemeIndexError, load_index

if TYPE_CHECKING:  # pragma: no cover
    from .cache import IconsCache
    from .config import IconThemeConfig

_LOGGER = logging.getLogger(__name__)

PIXMAPS_DIR = Path("/usr/share/pixmaps")


def _env_paths(var: str, default: str) -> List[Path]:
    raw = (os.environ.get(var, "") or "").strip() or default
    return [Path(p) for p in raw.split(os.pathsep) if p]


def default_search_dirs() -> List[Path]:
    """Base directories in the order of the Icon Theme Specification."""
    home = Path.home()
    dirs = [home / ".icons"]
    data_home = (os.environ.get("XDG_DATA_HOME", "") or "").strip()
    dirs.append((Path(data_home) if data_home else home / ".local" / "share") / "icons")
    for data_dir in _env_paths("XDG_DATA_DIRS", "/usr/local/share:/usr/share"):
        dirs.append(data_dir / "icons")

    unique: List[Path] = []
    for d in dirs:
        if d not in unique:
            unique.append(d)
    return unique


class IconSearch:
    """Finds icon themes on disk and builds an ``Icons`` index from them."""

    def __init__(
        self,
        dirs: Optional[Iterable[Path]] = None,
        standalone_dirs: Optional[Iterable[Path]] = None,
    ):
        self.dirs: List[Path] = [Path(d) for d in dirs] if dirs is not None else default_search_dirs()
        if standalone_dirs is not None:
            self.standalone_dirs: List[Path] = [Path(d) for d in standalone_dirs]
        else:
            self.standalone_dirs = list(self.dirs) + [PIXMAPS_DIR]

    @classmethod
    def from_config(cls, cfg: "IconThemeConfig") -> "IconSearch":
        search = cls()
        extra = cfg.search_paths()
        search.dirs = extra + [d for d in search.dirs if d not in extra]
        standalone = extra + cfg.standalone_paths()
        search.standalone_dirs = standalone + [d for d in search.standalone_dirs if d not in standalone]
        return search

    def add_directories(self, *dirs: Path) -> "IconSearch":
        for d in dirs:
            p = Path(d)
            if p not in self.dirs:
                self.dirs.append(p)
            if p not in self.standalone_dirs:
                self.standalone_dirs.append(p)
        return self

    # ---------- discovery ----------
    def _discover(self) -> Dict[str, Tuple[List[Path], ThemeIndex]]:
        found: Dict[str, Tuple[List[Path], ThemeIndex]] = {}
        broken: Set[str] = set()
        for base in self.dirs:
            try:
                children = sorted(p for p in base.iterdir() if p.is_dir())
            except OSError:
                continue
            for theme_dir in children:
                name = theme_dir.name
                if name in found:
                    # extra base dir of an already known theme
                    found[name][0].append(theme_dir)
                    continue
                if name in broken:
                    continue
                index_path = theme_dir / INDEX_FILE
                if not index_path.is_file():
                    continue
                try:
                    index = load_index(index_path)
                except (ThemeIndexError, OSError) as exc:
                    _LOGGER.warning("Ignoring theme %r: %s", name, exc)
                    broken.add(name)
                    continue
                found[name] = ([theme_dir], index)
        return found

    def search(self) -> Icons:
        discovered = self._discover()
        themes: Dict[str, Theme] = {}
        # chains without the implicit trailing hicolor
        listed: Dict[str, List[Theme]] = {}
        building: Set[str] = set()

        def build(name: str) -> Optional[Theme]:
            if name in themes:
                return themes[name]
            if name not in discovered:
                return None
            if name in building:
                _LOGGER.warning("Inheritance cycle through theme %r, ignoring back reference", name)
                return None
            building.add(name)
            base_dirs, index = discovered[name]

            chain: List[Theme] = []

            def push(theme: Theme) -> None:
                if theme.internal_name != name and all(t is not theme for t in chain):
                    chain.append(theme)

            # listed parents keep their position, hicolor included
            for parent_name in index.inherits:
                parent = build(parent_name)
                if parent is None:
                    if parent_name not in discovered:
                        _LOGGER.debug("Theme %r inherits unknown theme %r", name, parent_name)
                    continue
                push(parent)
                for ancestor in listed[parent_name]:
                    push(ancestor)
            listed[name] = list(chain)

            # implicit hicolor goes last, once
            if name != DEFAULT_THEME and DEFAULT_THEME not in building:
                fallback = build(DEFAULT_THEME)
                if fallback is not None:
                    push(fallback)

            building.discard(name)
            theme = Theme(ThemeInfo(name, tuple(base_dirs), index), tuple(chain))
            themes[name] = theme
            return theme

        for name in discovered:
            build(name)

        _LOGGER.debug("Found %d icon themes in %d search dirs", len(themes), len(self.dirs))
        return Icons(themes, self.standalone_dirs)

    def search_cached(self) -> "IconsCache":
        return self.search().cached()
