"""
Unified configuration loader for ChainErr.

Configurations can be provided as dictionaries, JSON/YAML files, YAML strings
or OmegaConf objects and are merged on top of the schema defaults. Every
merged result is validated against ``configs/config_default.yaml`` so typos in
section or key names fail loudly instead of being ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Union

import yaml
from omegaconf import DictConfig, OmegaConf

from .config_reference import CONFIG_SCHEMA, defaults


ConfigLike = Union[str, Path, Mapping[str, Any], DictConfig]


@dataclass
class LoadedConfig:
    """Container that exposes both OmegaConf and plain-dict views."""

    data: DictConfig

    def to_dict(self) -> Dict[str, Any]:
        return OmegaConf.to_container(self.data, resolve=True)  # type: ignore[return-value]

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Look up ``section.key`` returning ``default`` when absent."""
        return OmegaConf.select(self.data, dotted_key, default=default)


class ConfigLoader:
    """
    Load and merge ChainErr configuration sources.

    Parameters
    ----------
    global_config : Optional[ConfigLike]
        Optional path or mapping containing default configuration values.
        When omitted the schema defaults are used.
    """

    def __init__(self, global_config: Optional[ConfigLike] = None) -> None:
        base = OmegaConf.create(defaults())
        if global_config is not None:
            base = OmegaConf.merge(base, self._coerce(global_config))
        self._global_conf = base

    def _coerce(self, source: ConfigLike) -> DictConfig:
        """Convert arbitrary config-like inputs into an OmegaConf instance."""
        if isinstance(source, DictConfig):
            return source
        if isinstance(source, Mapping):
            return OmegaConf.create(dict(source))
        if isinstance(source, Path):
            return self._load_path(source)
        if isinstance(source, str):
            potential_path = Path(source)
            if "\n" not in source and (
                potential_path.suffix.lower() in {".yaml", ".yml", ".json"} or potential_path.exists()
            ):
                return self._load_path(potential_path)
            try:
                parsed = yaml.safe_load(source)
            except yaml.YAMLError as exc:
                raise ValueError(f"Failed to parse configuration string: {exc}") from exc
            if not isinstance(parsed, MutableMapping):
                raise ValueError("Configuration string must evaluate to a mapping.")
            return OmegaConf.create(dict(parsed))
        raise TypeError(f"Unsupported configuration source: {type(source)!r}")

    def _load_path(self, path: Path) -> DictConfig:
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        suffix = path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            loaded = OmegaConf.load(path)
            if not isinstance(loaded, DictConfig):
                raise ValueError(f"Configuration file must contain a mapping: {path}")
            return loaded
        if suffix == ".json":
            return OmegaConf.create(yaml.safe_load(path.read_text(encoding="utf-8")))
        raise ValueError(f"Unsupported configuration file format: '{suffix}'. Expected YAML or JSON.")

    @staticmethod
    def _validate(conf: DictConfig) -> None:
        for section, entries in conf.items():
            if section not in CONFIG_SCHEMA:
                raise ValueError(
                    f"Unknown configuration section '{section}'. Options: {list(CONFIG_SCHEMA)}"
                )
            if not isinstance(entries, DictConfig):
                raise ValueError(f"Configuration section '{section}' must be a mapping.")
            for key in entries.keys():
                if key not in CONFIG_SCHEMA[section]:
                    raise ValueError(f"Unknown configuration key '{section}.{key}'.")

    def load(
        self,
        config: Optional[ConfigLike] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> LoadedConfig:
        """Merge global defaults with optional additional configuration and overrides."""

        merged = self._global_conf.copy()

        if config is not None:
            merged = OmegaConf.merge(merged, self._coerce(config))

        if overrides:
            merged = OmegaConf.merge(merged, OmegaConf.create(dict(overrides)))

        self._validate(merged)
        return LoadedConfig(merged)
