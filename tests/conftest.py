import os

import pytest

from exactmoney import CurrencyRegistry, get_registry, get_settings


@pytest.fixture
def registry() -> CurrencyRegistry:
    """Fresh, mutable registry: USD built in, EUR at reference 0.85."""
    registry = CurrencyRegistry()
    registry.register("EUR", "Euro", "€", 2, "0.85000000")
    return registry


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    """No EXACTMONEY_* variables, no stray .env, and uncached settings/registry."""
    for name in list(os.environ):
        if name.upper().startswith("EXACTMONEY_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    get_registry.cache_clear()
    yield
    get_settings.cache_clear()
    get_registry.cache_clear()
