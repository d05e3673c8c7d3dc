from __future__ import annotations
from pydantic import BaseModel, Field, ValidationError
from typing import List, Optional, Union, Dict
import yaml, pathlib, os

from .icons import DEFAULT_THEME


class ConfigError(ValueError):
    pass


def _expand(raw: str) -> pathlib.Path:
    return pathlib.Path(os.path.expandvars(os.path.expanduser(str(raw))))


class IconThemeConfig(BaseModel):
    extra_search_paths: List[str] = Field(default_factory=list)   # searched before the XDG dirs
    extra_standalone_paths: List[str] = Field(default_factory=list)
    default_theme: str = DEFAULT_THEME
    pre_populate: bool = False
    log_level: str = "INFO"
    logs_dir: Optional[str] = None

    def search_paths(self) -> List[pathlib.Path]:
        return [_expand(p) for p in self.extra_search_paths if p]

    def standalone_paths(self) -> List[pathlib.Path]:
        return [_expand(p) for p in self.extra_standalone_paths if p]

    def resolved_logs_dir(self) -> Optional[pathlib.Path]:
        return _expand(self.logs_dir) if self.logs_dir else None


def _state_dir() -> pathlib.Path:
    base = (os.environ.get("XDG_CONFIG_HOME", "") or "").strip()
    if base:
        return pathlib.Path(base) / "icontheme"
    return pathlib.Path.home() / ".config" / "icontheme"


def _cfg_file(path: Union[str, pathlib.Path, None] = None) -> pathlib.Path:
    if path:
        return _expand(str(path))
    env = (os.environ.get("ICONTHEME_CONFIG", "") or "").strip()
    if env:
        return _expand(env)
    return _state_dir() / "config.yaml"


def _model_to_dict(model) -> Dict:
    if hasattr(model, "model_dump"):
        return model.model_dump()
    return model.dict()


def load_config(path: Union[str, pathlib.Path, None] = None) -> IconThemeConfig:
    """Load the configuration, falling back to defaults when no file exists.

    Lookup order: ``path``, ``$ICONTHEME_CONFIG``, ``<state dir>/config.yaml``.
    """
    cfg_path = _cfg_file(path)
    if not cfg_path.exists():
        return IconThemeConfig()
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"could not read {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path}: expected a YAML mapping")
    try:
        return IconThemeConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"{cfg_path}: {exc}") from exc


def save_config(cfg: IconThemeConfig, path: Union[str, pathlib.Path, None] = None) -> str:
    cfg_path = _cfg_file(path)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    with open(cfg_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(_model_to_dict(cfg), f, sort_keys=False, allow_unicode=True)
    return str(cfg_path)
