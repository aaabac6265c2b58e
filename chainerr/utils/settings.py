"""
Process-wide active configuration.

Settings are loaded lazily on first access so that importing :mod:`chainerr`
never touches the filesystem. When ``CHAINERR_CONFIG`` points at a YAML/JSON
file it is merged on top of the schema defaults.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

from loguru import logger

from .config_loader import ConfigLike, ConfigLoader, LoadedConfig
from .profiles import get_profile

CONFIG_ENV_VAR = "CHAINERR_CONFIG"

_active: Optional[LoadedConfig] = None


def env_config_path() -> Optional[Path]:
    raw = os.environ.get(CONFIG_ENV_VAR)
    return Path(raw) if raw else None


def get_settings() -> LoadedConfig:
    """Return the active settings, loading defaults on first use."""

    global _active
    if _active is None:
        env_path = env_config_path()
        _active = ConfigLoader().load(env_path)
        if env_path is not None:
            logger.debug("Loaded ChainErr settings from {}", env_path)
    return _active


def configure(
    config: Optional[ConfigLike] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    profile: Optional[str] = None,
) -> LoadedConfig:
    """
    Replace the active settings.

    The profile (if any) is applied first, then ``config`` and finally
    ``overrides``. Existing error instances are not affected.
    """

    global _active
    loader = ConfigLoader(get_profile(profile) if profile else None)
    _active = loader.load(config, overrides=overrides)
    logger.debug("ChainErr settings reconfigured (profile={})", profile or "-")
    return _active


def reset_settings() -> None:
    """Drop the active settings so the next access reloads defaults."""

    global _active
    _active = None
