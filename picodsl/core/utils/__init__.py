from .casing import kebab_case
from .config import (
    DEFAULT_SETTINGS,
    configure_logging,
    load_config,
    load_settings,
    merge_configs,
    save_config,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "configure_logging",
    "kebab_case",
    "load_config",
    "load_settings",
    "merge_configs",
    "save_config",
]
