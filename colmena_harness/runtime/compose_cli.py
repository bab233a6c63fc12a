"""Compose CLI runtime - shells out to ``docker`` and ``docker compose``."""

from __future__ import annotations

import subprocess
from typing import Callable, Sequence

from colmena_harness.core.config import Settings
from colmena_harness.core.exceptions import ContainerNotFoundError, RuntimeCommandError
from colmena_harness.core.logging import get_logger
from colmena_harness.runtime.base import ExecResult

logger = get_logger("runtime.cli")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


class ComposeCliRuntime:
    """
    Container runtime backed by the docker command line.

    Used when the docker SDK cannot reach the daemon, and always for
    ``compose up`` since the SDK has no compose support.
    """

    name = "cli"

    def __init__(
        self,
        settings: Settings,
        runner: Runner = subprocess.run,
        command_timeout: float = 60.0,
    ):
        self.settings = settings
        self._runner = runner
        self.command_timeout = command_timeout

    def exec_in_container(self, container: str, command: Sequence[str]) -> ExecResult:
        cmd = ["docker", "exec", container, *command]
        result = self._run(cmd)
        output = result.stdout or ""
        stderr = result.stderr or ""
        if result.returncode != 0 and (
            "No such container" in stderr or "is not running" in stderr
        ):
            raise ContainerNotFoundError(
                f"Container '{container}' is not running",
                command=cmd,
                exit_code=result.returncode,
                output=stderr,
            )
        if result.returncode != 0:
            output = output + stderr
        return ExecResult(exit_code=result.returncode, output=output)

    def compose_status(self) -> str:
        cmd = [*self.settings.compose_argv, "ps", "--format", "table"]
        return self._checked(cmd).stdout

    def service_logs(self, service: str, tail: int = 10) -> str:
        cmd = [*self.settings.compose_argv, "logs", service, f"--tail={tail}"]
        return self._checked(cmd).stdout

    def compose_up(self) -> None:
        cmd = [*self.settings.compose_argv, "up", "-d"]
        logger.info("Starting stack: %s", " ".join(cmd))
        self._checked(cmd, timeout=self.settings.stack_startup_timeout)

    def close(self) -> None:
        pass

    def _checked(
        self, cmd: list[str], timeout: float | None = None
    ) -> "subprocess.CompletedProcess[str]":
        result = self._run(cmd, timeout=timeout)
        if result.returncode != 0:
            raise RuntimeCommandError(
                f"Command failed: {(result.stderr or '').strip() or result.returncode}",
                command=cmd,
                exit_code=result.returncode,
                output=result.stderr,
            )
        return result

    def _run(
        self, cmd: list[str], timeout: float | None = None
    ) -> "subprocess.CompletedProcess[str]":
        logger.debug("Running %s", " ".join(cmd))
        try:
            return self._runner(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout or self.command_timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise RuntimeCommandError(
                f"Executable not found: {cmd[0]}", command=cmd
            ) from e
        except subprocess.TimeoutExpired as e:
            raise RuntimeCommandError(
                f"Command timed out after {e.timeout}s", command=cmd
            ) from e
