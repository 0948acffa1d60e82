# tests/conftest.py

import pytest

from kubemeter.core.factory import get_processor


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Pytest fixture to mock environment variables for the config module.

    This fixture runs automatically for every test (`autouse=True`). It uses
    monkeypatch to set environment variables, ensuring that price lookups
    and secrets are predictable and isolated from the actual environment.
    """
    monkeypatch.setenv("PROMETHEUS_URL", "http://prometheus:9090")
    monkeypatch.setenv("CURRENCY_UNIT", "USD")
    monkeypatch.setenv("PRICE_CPU_PER_CORE_HOUR", "3")
    monkeypatch.setenv("PRICE_MEM_PER_GIB_HOUR", "2")
    monkeypatch.setenv("PRICE_INGRESS_PER_MB_HOUR", "1")
    monkeypatch.setenv("PRICE_EGRESS_PER_MB_HOUR", "1")
    monkeypatch.setenv("PRICE_PVC_PER_GIB_HOUR", "0.5")
    monkeypatch.delenv("PROMETHEUS_BEARER_TOKEN", raising=False)


@pytest.fixture(autouse=True)
def clear_processor_cache():
    """Ensures no test reuses a processor built by another one."""
    get_processor.cache_clear()
    yield
    get_processor.cache_clear()
