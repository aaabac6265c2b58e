"""
Predefined configuration profiles for ChainErr.

Profiles provide convenient shortcuts for common deployment modes such as
lean production builds or deep debugging sessions. They are merged on top of
schema defaults before user overrides are applied.
"""

from __future__ import annotations

from typing import Dict

from omegaconf import OmegaConf


PROFILES: Dict[str, Dict[str, object]] = {
    "compact": {
        "stack": {
            "capture": False,
        },
    },
    "verbose": {
        "stack": {
            "capture": True,
            "limit": None,
        },
        "rendering": {
            "max_depth": 4096,
        },
        "logging": {
            "level": "DEBUG",
        },
    },
    "legacy": {
        "errors": {
            "cause_storage": "simulated",
        },
    },
}


def list_profiles() -> Dict[str, Dict[str, object]]:
    """Return a copy of the registered profiles."""

    return {name: OmegaConf.to_container(OmegaConf.create(conf), resolve=True) for name, conf in PROFILES.items()}


def get_profile(name: str) -> Dict[str, object]:
    """Return a profile configuration by name."""

    if name not in PROFILES:
        raise KeyError(f"Unknown profile '{name}'. Available profiles: {list(PROFILES)}")
    return OmegaConf.to_container(OmegaConf.create(PROFILES[name]), resolve=True)
