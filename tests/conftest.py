"""Shared test fixtures for the ChainMind client.

Every test starts from a clean settings environment: no ``CHAINMIND_*``
or OpenRouter variables leak in from the developer's shell, no ``.env``
file is picked up, and the cached settings are rebuilt on demand.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from chainmind.settings import get_settings


# =============================================================================
# SETTINGS
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Strip ChainMind env vars and reset the settings cache around each test."""
    for var in list(os.environ):
        if var.upper().startswith(("CHAINMIND_", "OPENROUTER_")):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
