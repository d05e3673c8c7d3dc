"""Icon theme lookup: theme discovery, matching and caching."""

from importlib import import_module as _import_module
from typing import Any as _Any

# public name -> submodule that defines it
_EXPORTS = {
    "Directory": "theme_models",
    "DirectoryRef": "theme_models",
    "DirectoryType": "theme_models",
    "FileType": "theme_models",
    "IconFile": "theme_models",
    "ThemeIndex": "theme_index",
    "ThemeIndexError": "theme_index",
    "Theme": "theme",
    "ThemeInfo": "theme",
    "Icons": "icons",
    "IconSearch": "search",
    "ThemeCache": "cache",
    "IconsCache": "cache",
    "IconThemeConfig": "config",
    "load_config": "config",
}

__all__ = sorted(_EXPORTS)

# Lazy re-export so ``from icontheme.core import IconsCache`` works
# without importing every submodule eagerly.

def __getattr__(name: str) -> _Any:
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
    value = getattr(_import_module(f"{__name__}.{module_name}"), name)
    globals()[name] = value
    return value


def __dir__() -> list:
    return sorted(set(globals()) | set(__all__))
