"""Configuration utilities for ChainErr. `ErrorLogger` lives in :mod:`chainerr.utils.logger`."""

from .config_loader import ConfigLoader, LoadedConfig
from .settings import configure, get_settings, reset_settings

__all__ = ["ConfigLoader", "LoadedConfig", "configure", "get_settings", "reset_settings"]
