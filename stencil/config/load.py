from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigError
from .model import StencilConfig

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _load_yaml(path: Path, encoding: str) -> Any:
    try:
        with path.open(encoding=encoding) as f:
            return _yaml.load(f)
    except YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: cannot decode as {encoding}: {e}") from e


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def load_config(path: Path) -> StencilConfig:
    """
    Load stencil.yaml.

    • A missing file yields the defaults.
    • An empty file yields the defaults.
    • Unknown keys and mistyped values raise ConfigError naming the field.
    """
    if not path.exists():
        logger.debug(f"No config at {path}, using defaults")
        return StencilConfig()

    raw = _load_yaml(path, "utf-8")
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(raw).__name__}")

    try:
        cfg = StencilConfig.model_validate(dict(raw))
    except ValidationError as e:
        first = e.errors()[0]
        raise ConfigError(f"{path}: {_field_path(first['loc'])}: {first['msg']}") from e

    logger.debug(f"Loaded config {path}: encoding={cfg.encoding}, null_policy={cfg.null_policy.value}, {len(cfg.vars)} vars")
    return cfg


def load_vars(path: Path, encoding: str = "utf-8") -> Dict[str, Any]:
    """
    Load a YAML mapping of bindings.

    Keys must be strings; values are passed to templates as loaded.
    """
    if not path.is_file():
        raise ConfigError(f"Variables file not found: {path}")

    raw = _load_yaml(path, encoding)
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{path}: variables file must contain a mapping, got {type(raw).__name__}")

    for key in raw:
        if not isinstance(key, str):
            raise ConfigError(f"{path}: variable names must be strings, got {key!r}")

    return dict(raw)


__all__ = ["load_config", "load_vars"]
