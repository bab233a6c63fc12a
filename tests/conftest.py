"""Pytest configuration and fixtures for the harness unit tests."""

from __future__ import annotations

import pytest

from colmena_harness.core.config import Settings, get_settings

from fakes import FakeRuntime

pytest_plugins = ["pytest_asyncio"]


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are cached per process; tests must not leak env changes."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


HARNESS_ENV_VARS = (
    "CI",
    "SUPERADMIN_EMAIL",
    "SUPERADMIN_PASSWORD",
    "PROBE_SERVICES",
    "CORE_SERVICES",
    "FRONTEND_URL",
    "BACKEND_URL",
    "RUNTIME_BACKEND",
    "HTTP_PROBE_BACKEND",
    "E2E_REQUIRE_LOGIN_FORM",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove harness variables a CI machine or shell may have exported."""
    for name in HARNESS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def settings(clean_env: pytest.MonkeyPatch) -> Settings:
    """Default settings, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def fake_runtime() -> FakeRuntime:
    return FakeRuntime()
