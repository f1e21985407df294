from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from omegaconf import DictConfig, OmegaConf

from ..errors import PreconditionError

SETTINGS_ENV_VAR = "PICODSL_SETTINGS"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "path": {
        "separator": "/",
        "tie_break": "declaration",  # declaration | name
    },
    "validation": {
        "require_stage_or_template": True,
        "unique_names": True,
    },
    "diagnostics": {
        "capture_definition_site": True,
    },
    "logging": {
        "level": "WARNING",
    },
}

_TIE_BREAK_RULES = ("declaration", "name")

SettingsLike = Union[str, Path, DictConfig, Dict[str, Any], None]


def load_config(path: str | Path | DictConfig) -> DictConfig:
    """Load a settings file; ``_base_`` names a file it inherits from."""
    if isinstance(path, (str, Path)):
        cfg = OmegaConf.load(path)
        base_dir = Path(path).parent
    else:
        cfg = path
        base_dir = Path.cwd()

    if "_base_" in cfg:
        base_path = Path(str(cfg._base_))
        if not base_path.is_absolute():
            base_path = base_dir / base_path
        base = load_config(base_path)
        cfg = OmegaConf.merge(base, cfg)
        del cfg["_base_"]

    return OmegaConf.create(cfg)


def save_config(config: DictConfig, path: str | Path) -> None:
    OmegaConf.save(config, path)


def merge_configs(*configs: DictConfig) -> DictConfig:
    """Merge several configs (the last one wins)."""
    return OmegaConf.merge(*configs)


def load_settings(source: SettingsLike = None, **overrides: Any) -> DictConfig:
    """Build settings: defaults, then ``source`` (file, dict or DictConfig), then overrides.

    Without an explicit source the file named by ``PICODSL_SETTINGS`` is used
    when that variable is set.
    """
    layers = [OmegaConf.create(DEFAULT_SETTINGS)]

    if source is None:
        env_path = os.getenv(SETTINGS_ENV_VAR)
        if env_path:
            source = env_path
    if isinstance(source, (str, Path)):
        layers.append(load_config(source))
    elif isinstance(source, dict):
        layers.append(OmegaConf.create(source))
    elif source is not None:
        layers.append(source)
    if overrides:
        layers.append(OmegaConf.create(overrides))

    settings = merge_configs(*layers)
    validate_settings(settings)
    return settings


def validate_settings(settings: DictConfig) -> None:
    tie_break = settings.path.tie_break
    if tie_break not in _TIE_BREAK_RULES:
        raise PreconditionError(
            f"path.tie_break must be one of {_TIE_BREAK_RULES}, got {tie_break!r}"
        )
    if not isinstance(settings.path.separator, str):
        raise PreconditionError("path.separator must be a string")


def configure_logging(settings: Optional[DictConfig] = None) -> logging.Logger:
    """Attach a console handler to the ``picodsl`` logger at the configured level."""
    settings = settings if settings is not None else load_settings()
    logger = logging.getLogger("picodsl")
    logger.setLevel(getattr(logging, str(settings.logging.level).upper()))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(handler)
    return logger
