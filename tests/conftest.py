"""Shared pytest fixtures for infixcalc tests."""

from pathlib import Path

import pytest

from infixcalc.core import Registry, default_registry


@pytest.fixture
def registry() -> Registry:
    """Return a registry seeded with the built-in catalog."""
    return default_registry()


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory so no stray infixcalc.toml is picked up."""
    monkeypatch.chdir(tmp_path)
    for name in ("INFIXCALC_MAX_DEPTH", "INFIXCALC_HOST", "INFIXCALC_PORT", "INFIXCALC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path
