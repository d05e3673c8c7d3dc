"""Parsing of ``index.theme`` files."""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .theme_models import DEFAULT_THRESHOLD, Directory, DirectoryType

_LOGGER = logging.getLogger(__name__)

THEME_SECTION = "Icon Theme"
INDEX_FILE = "index.theme"


class ThemeIndexError(ValueError):
    pass


@dataclass(frozen=True)
class ThemeIndex:
    name: str
    comment: str = ""
    inherits: Tuple[str, ...] = ()
    directories: Tuple[Directory, ...] = ()
    hidden: bool = False
    example: Optional[str] = None
    source: Optional[str] = field(default=None, compare=False)


def _split_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _as_bool(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in ("true", "1")


def _opt_int(section: configparser.SectionProxy, key: str) -> Optional[int]:
    raw = section.get(key)
    if raw is None or not raw.strip():
        return None
    return int(raw.strip())


def _parse_directory(parser: configparser.ConfigParser, name: str, source: str) -> Optional[Directory]:
    if not parser.has_section(name):
        _LOGGER.warning("%s: directory %r listed without a section, skipping", source, name)
        return None
    section = parser[name]
    try:
        size = _opt_int(section, "Size")
        if size is None:
            _LOGGER.warning("%s: directory %r has no Size, skipping", source, name)
            return None
        scale = _opt_int(section, "Scale")
        threshold = _opt_int(section, "Threshold")
        return Directory(
            name=name,
            size=size,
            scale=1 if scale is None else scale,
            type=DirectoryType.parse(section.get("Type")),
            min_size=_opt_int(section, "MinSize"),
            max_size=_opt_int(section, "MaxSize"),
            threshold=DEFAULT_THRESHOLD if threshold is None else threshold,
            context=section.get("Context"),
        )
    except ValueError as exc:
        _LOGGER.warning("%s: directory %r has invalid metadata (%s), skipping", source, name, exc)
        return None


def parse_index(text: str, source: Optional[str] = None) -> ThemeIndex:
    """Parse the contents of an ``index.theme`` file.

    Raises ``ThemeIndexError`` when the ``[Icon Theme]`` section or its
    ``Name`` key is missing, or when the file is not valid INI.
    """

    label = source or "<index.theme>"
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str  # keys are case sensitive
    try:
        parser.read_string(text, source=label)
    except configparser.Error as exc:
        raise ThemeIndexError(f"{label}: {exc}") from exc

    if not parser.has_section(THEME_SECTION):
        raise ThemeIndexError(f"{label}: missing [{THEME_SECTION}] section")
    head = parser[THEME_SECTION]
    name = (head.get("Name") or "").strip()
    if not name:
        raise ThemeIndexError(f"{label}: missing Name")

    dir_names = _split_list(head.get("Directories"))
    for scaled in _split_list(head.get("ScaledDirectories")):
        if scaled not in dir_names:
            dir_names.append(scaled)

    directories = []
    for dir_name in dir_names:
        directory = _parse_directory(parser, dir_name, label)
        if directory is not None:
            directories.append(directory)

    return ThemeIndex(
        name=name,
        comment=(head.get("Comment") or "").strip(),
        inherits=tuple(_split_list(head.get("Inherits"))),
        directories=tuple(directories),
        hidden=_as_bool(head.get("Hidden")),
        example=(head.get("Example") or "").strip() or None,
        source=source,
    )


def load_index(path: Union[str, Path]) -> ThemeIndex:
    p = Path(path)
    text = p.read_text(encoding="utf-8", errors="replace")
    return parse_index(text, source=str(p))
