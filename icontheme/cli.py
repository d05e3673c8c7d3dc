"""Look up freedesktop icons from the command line."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from icontheme.core.cache import IconsCache
from icontheme.core.config import ConfigError, IconThemeConfig, load_config
from icontheme.core.errguard import install_error_guard, on_exit_flush
from icontheme.core.search import IconSearch
from icontheme.version import __version__


def _build_cache(cfg: IconThemeConfig, extra_dirs: List[Path], pre_populate: bool) -> IconsCache:
    search = IconSearch.from_config(cfg)
    if extra_dirs:
        search.add_directories(*extra_dirs)
    cache = search.search_cached()
    if pre_populate or cfg.pre_populate:
        cache.pre_populate_cache()
    return cache


def _cmd_find(args: argparse.Namespace, cfg: IconThemeConfig) -> int:
    cache = _build_cache(cfg, args.dir, args.prepopulate)
    theme = args.theme or cfg.default_theme
    icon = cache.find_icon(args.name, args.size, args.scale, theme)
    if icon is None:
        print(f"{args.name}: not found", file=sys.stderr)
        return 1
    print(icon.path)
    return 0


def _cmd_themes(args: argparse.Namespace, cfg: IconThemeConfig) -> int:
    cache = _build_cache(cfg, args.dir, False)
    for name in sorted(cache.themes):
        theme = cache.themes[name].theme
        parents = ", ".join(p.internal_name for p in theme.inherits_from)
        print(f"{name}\t{theme.info.display_name}\t[{parents}]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="icontheme", description=__doc__)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, default=None, help="Configuration file (YAML)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging on stderr")
    parser.add_argument(
        "--dir",
        type=Path,
        action="append",
        default=[],
        help="Additional icon base directory (repeatable)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    find = sub.add_parser("find", help="Resolve an icon to a file path")
    find.add_argument("name")
    find.add_argument("--size", type=int, default=48)
    find.add_argument("--scale", type=int, default=1)
    find.add_argument("--theme", default=None, help="Theme name (default from config)")
    find.add_argument("--prepopulate", action="store_true", help="Fill the cache from a full scan first")
    find.set_defaults(func=_cmd_find)

    themes = sub.add_parser("themes", help="List known themes and their inheritance")
    themes.set_defaults(func=_cmd_themes)
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        cfg = load_config(args.config)
    except ConfigError as exc:
        parser.error(str(exc))
    logs_dir = cfg.resolved_logs_dir()
    install_error_guard(
        logs_dir=str(logs_dir) if logs_dir else None,
        verbose=args.verbose,
        level=cfg.log_level,
    )
    try:
        return args.func(args, cfg)
    finally:
        on_exit_flush()


if __name__ == "__main__":
    sys.exit(main())
