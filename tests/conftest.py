"""
Shared pytest fixtures for the hatter test suite.

Usage in tests:
    def test_something(hat_factory):
        editor = hat_factory.editor("foo bar", cursor=(0, 4))
        hats = hat_factory.allocate(editor)
"""

import pytest

from hatter.config import ConfigManager
from tests.factories import HatTestFactory


@pytest.fixture(autouse=True)
def clean_hatter_env(monkeypatch, tmp_path):
    """Keep the real environment and ~/.hatter out of every test."""
    for key in ("HATTER_STABILITY", "HATTER_PRESERVE_CASE", "HATTER_DEBOUNCE_MS",
                "HATTER_PROJECT_PATH", "HATTER_ASCII_ONLY", "HATTER_UNICODE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", tmp_path / "home" / ".hatter" / "config.yaml")


@pytest.fixture
def hat_factory():
    """
    Create a HatTestFactory with the full default hat catalog.

    Example:
        def test_first_token(hat_factory):
            hats = hat_factory.allocate(hat_factory.editor("a)"))
            assert hats[0].hat_style == "default"
    """
    return HatTestFactory()


@pytest.fixture
def scarce_factory():
    """Factory whose catalog holds only the default and blue styles."""
    return HatTestFactory(colors=["default", "blue"], shapes=["default"])
