"""Shared fixtures for the ChainErr test-suite."""

from __future__ import annotations

import pytest

from chainerr.core import native
from chainerr.utils.settings import CONFIG_ENV_VAR, reset_settings


@pytest.fixture(autouse=True)
def _isolated_state(monkeypatch: pytest.MonkeyPatch):
    """Each test starts from default settings and without the native serializer."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(native, "_installed", None)
    reset_settings()
    yield
    reset_settings()
