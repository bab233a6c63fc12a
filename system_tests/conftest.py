"""
System Test Configuration - pytest fixtures for the browser integration suite.

This conftest sets up a black-box environment where:
1. The compose stack is brought up (or reused) once per run, before any test
2. Every case gets a fresh Playwright browser context per engine
3. Absent UI preconditions are reported as explicit skips
4. Failures get a JSON report with the application service logs

Run through ``colmena-e2e`` to get the full runner policy (timeouts,
retries, browser matrix, artifacts).
"""

from __future__ import annotations

from datetime import datetime, UTC
from typing import Any, Generator

import httpx
import pytest
from playwright.sync_api import Page, Playwright, expect

from colmena_harness.core.config import Settings, get_settings
from colmena_harness.core.exceptions import HarnessError
from colmena_harness.environment import (
    StackEnvironment,
    bootstrap_stack,
    stack_bootstrapped,
)
from colmena_harness.runner import DEVICE_PROFILES, RunnerConfig
from colmena_harness.runtime import resolve_runtime
from colmena_harness.runtime.base import ContainerRuntime
from system_tests.config import SystemTestConfig, get_config
from system_tests.fixtures.preconditions import require
from system_tests.pages import AppPage
from system_tests.reporters.failure_report import FailureReport


# =============================================================================
# CONFIGURATION
# =============================================================================


@pytest.fixture(scope="session")
def settings() -> Settings:
    return get_settings()


@pytest.fixture(scope="session")
def system_config() -> SystemTestConfig:
    """Load system test configuration from environment."""
    return get_config()


# =============================================================================
# CONTAINER RUNTIME AND STACK ENVIRONMENT (Session-scoped)
# =============================================================================


@pytest.fixture(scope="session")
def stack_runtime(settings: Settings) -> Generator[ContainerRuntime, None, None]:
    """Container runtime used for failure logs."""
    try:
        runtime = resolve_runtime(settings)
    except HarnessError as e:
        pytest.fail(e.message)
    yield runtime
    runtime.close()


@pytest.hookimpl(tryfirst=True)
def pytest_sessionstart(session: pytest.Session) -> None:
    """
    Bring up the compose stack once per run, before any test starts.

    Runs on the xdist controller before workers are spawned; workers and
    runs started through ``colmena-e2e`` find the stack already up.
    Reuses an already-running stack unless on CI.
    """
    if hasattr(session.config, "workerinput") or stack_bootstrapped():
        return

    settings = get_settings()
    try:
        bootstrap_stack(settings)
    except HarnessError as e:
        pytest.exit(
            f"{e.message}\n\nStart the stack with:\n"
            f"  {' '.join(settings.compose_argv)} up -d",
            returncode=1,
        )


@pytest.fixture(scope="session", autouse=True)
def stack_environment(
    settings: Settings,
    stack_runtime: ContainerRuntime,
    system_config: SystemTestConfig,
) -> StackEnvironment:
    """The running compose stack; fails the session if it stopped listening."""
    environment = StackEnvironment(settings, stack_runtime)

    print("\n" + "=" * 60)
    print("COLMENAOS BROWSER INTEGRATION SUITE")
    print("=" * 60)
    print(f"  Frontend: {system_config.frontend_url}")
    print(f"  Backend:  {system_config.backend_url}")
    print(f"  CI:       {'yes' if settings.ci else 'no'}")
    print("=" * 60)

    if not environment.port_open():
        pytest.fail(
            f"Stack is no longer listening on {environment.host}:{environment.port}"
        )

    print("\n  Stack ready, starting browser tests...\n")
    return environment


# =============================================================================
# BROWSER CONTEXT
# =============================================================================


@pytest.fixture(scope="session")
def browser_context_args(
    browser_context_args: dict[str, Any],
    pytestconfig: pytest.Config,
    playwright: Playwright,
    browser_name: str,
    system_config: SystemTestConfig,
) -> dict[str, Any]:
    """Apply the desktop device profile that matches the browser engine."""
    args = dict(browser_context_args)
    profile = DEVICE_PROFILES.get(browser_name)
    if profile and not pytestconfig.getoption("--device"):
        device = {
            key: value
            for key, value in playwright.devices[profile].items()
            if key != "default_browser_type"
        }
        args = {**device, **args}
    args.setdefault("base_url", system_config.frontend_url)
    return args


@pytest.fixture
def app_page(page: Page, system_config: SystemTestConfig) -> AppPage:
    """Frontend shell opened at the application root."""
    return AppPage(page, system_config).open()


@pytest.fixture
def logged_in_page(app_page: AppPage, system_config: SystemTestConfig) -> AppPage:
    """
    Frontend shell after a superadmin login.

    Skips (or fails, with E2E_REQUIRE_LOGIN_FORM=1) when no login form
    is rendered.
    """
    require(app_page.login_form(), required=system_config.require_login_form)
    app_page.login(system_config.superadmin)
    return app_page


# =============================================================================
# HTTP CLIENT
# =============================================================================


@pytest.fixture
def backend_client(system_config: SystemTestConfig) -> Generator[httpx.Client, None, None]:
    """HTTP client configured for the backend API."""
    with httpx.Client(
        base_url=system_config.backend_url,
        timeout=system_config.http_timeout,
    ) as client:
        yield client


# =============================================================================
# FAILURE REPORTS
# =============================================================================


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase report on the item for fixtures to inspect."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture(autouse=True)
def failure_report(
    request: pytest.FixtureRequest,
    settings: Settings,
    stack_runtime: ContainerRuntime,
) -> Generator[None, None, None]:
    """Write a JSON report with application logs when the test body fails."""
    test_start = datetime.now(UTC)

    yield

    rep_call = getattr(request.node, "rep_call", None)
    if rep_call is None or not rep_call.failed:
        return

    report = FailureReport(
        test_id=request.node.nodeid,
        test_name=request.node.name,
        test_start=test_start,
        test_end=datetime.now(UTC),
        assertion_error=str(rep_call.longrepr) if rep_call.longrepr else None,
        service=settings.app_service,
    )
    try:
        logs = stack_runtime.service_logs(settings.app_service, tail=50)
        report.service_logs = logs.splitlines()
    except HarnessError as e:
        report.log_error = e.message

    path = report.save()
    print(f"\n  Failure report: {path}")


# =============================================================================
# PYTEST HOOKS
# =============================================================================


def pytest_configure(config):
    """Register markers and the per-assertion timeout."""
    config.addinivalue_line(
        "markers",
        "workflow: End-to-end user flow driven through the browser",
    )
    config.addinivalue_line(
        "markers",
        "smoke: Quick reachability check of the deployed stack",
    )
    runner = RunnerConfig.from_settings(get_settings())
    expect.set_options(timeout=runner.expect_timeout * 1000)


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location."""
    for item in items:
        if "/smoke/" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)

        if "/workflows/" in str(item.fspath):
            item.add_marker(pytest.mark.workflow)
