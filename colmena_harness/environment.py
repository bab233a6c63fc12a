"""
Stack Environment - bring up the compose stack before browser tests.

Mirrors the usual dev-server contract of browser test runners:
1. If the stack port already answers and we are not on CI, reuse it
2. On CI an occupied port is an error (stale stack from another job)
3. Otherwise run ``compose up -d`` and wait for the port
"""

from __future__ import annotations

import os
import socket
import time
from enum import Enum
from typing import Callable
from urllib.parse import urlparse

from colmena_harness.core.config import Settings
from colmena_harness.core.exceptions import EnvironmentStartupError, HarnessError
from colmena_harness.core.logging import get_logger
from colmena_harness.runtime.base import ContainerRuntime
from colmena_harness.runtime.compose_cli import ComposeCliRuntime

logger = get_logger("environment")

# Set by colmena-e2e after bootstrap, inherited by pytest-xdist workers
STACK_READY_ENV = "COLMENA_STACK_READY"


class EnvironmentState(str, Enum):
    REUSED = "reused"
    STARTED = "started"


def tcp_port_open(host: str, port: int, timeout: float = 1.0) -> bool:
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


class StackEnvironment:
    """Ensures the containerized stack is listening on the frontend port."""

    def __init__(
        self,
        settings: Settings,
        runtime: ContainerRuntime | None = None,
        port_check: Callable[[str, int], bool] = tcp_port_open,
        poll_interval: float = 1.0,
    ):
        self.settings = settings
        self.runtime = runtime or ComposeCliRuntime(settings)
        self._port_check = port_check
        self.poll_interval = poll_interval
        self.host = urlparse(settings.frontend_url).hostname or "localhost"
        self.port = settings.stack_port

    @property
    def reuse_existing(self) -> bool:
        return not self.settings.ci

    def port_open(self) -> bool:
        return self._port_check(self.host, self.port)

    def ensure_running(self) -> EnvironmentState:
        if self.port_open():
            if self.reuse_existing:
                logger.info("Reusing stack already listening on %s:%s", self.host, self.port)
                return EnvironmentState.REUSED
            raise EnvironmentStartupError(
                f"{self.host}:{self.port} is already in use; "
                f"stop the running stack before a CI run",
                details={"port": self.port},
            )

        try:
            self.runtime.compose_up()
        except HarnessError as e:
            raise EnvironmentStartupError(
                f"compose up failed: {e.message}", details=e.details
            ) from e

        self.wait_for_port()
        return EnvironmentState.STARTED

    def wait_for_port(self, timeout: float | None = None) -> None:
        """Poll the stack port until it accepts connections."""
        timeout = timeout or self.settings.stack_startup_timeout
        start = time.time()

        while (time.time() - start) < timeout:
            if self.port_open():
                logger.info(
                    "Stack listening on %s:%s after %.1fs",
                    self.host, self.port, time.time() - start,
                )
                return
            time.sleep(self.poll_interval)

        raise EnvironmentStartupError(
            f"Timed out after {timeout:.0f}s waiting for {self.host}:{self.port}",
            details={"compose_file": self.settings.compose_file},
        )


def bootstrap_stack(
    settings: Settings, environment: StackEnvironment | None = None
) -> EnvironmentState:
    """
    Bring the stack up once, before the test session starts.

    Runs in the ``colmena-e2e`` process, outside any test timeout and
    before pytest-xdist spawns workers. Workers inherit the ready flag
    through the environment.
    """
    environment = environment or StackEnvironment(settings)
    state = environment.ensure_running()
    os.environ[STACK_READY_ENV] = "1"
    return state


def stack_bootstrapped() -> bool:
    """Whether ``colmena-e2e`` already brought the stack up for this run."""
    return os.environ.get(STACK_READY_ENV) == "1"
