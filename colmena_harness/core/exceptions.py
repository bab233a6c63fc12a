"""Harness exceptions with structured error details."""

from __future__ import annotations

from typing import Any, Sequence


class HarnessError(Exception):
    """Base harness exception with a structured error payload."""

    error_code: str = "HARNESS_ERROR"
    message: str = "An unexpected harness error occurred"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }


class ConfigurationError(HarnessError):
    """Invalid or inconsistent configuration."""

    error_code = "CONFIGURATION_ERROR"
    message = "Invalid harness configuration"


class RuntimeUnavailableError(HarnessError):
    """No container runtime could be reached."""

    error_code = "RUNTIME_UNAVAILABLE"
    message = "Container runtime is not available"


class RuntimeCommandError(HarnessError):
    """A container or compose command failed."""

    error_code = "RUNTIME_COMMAND_FAILED"
    message = "Container runtime command failed"

    def __init__(
        self,
        message: str | None = None,
        command: Sequence[str] | None = None,
        exit_code: int | None = None,
        output: str | None = None,
    ):
        self.command = list(command) if command else []
        self.exit_code = exit_code
        self.output = output or ""
        details: dict[str, Any] = {}
        if self.command:
            details["command"] = " ".join(self.command)
        if exit_code is not None:
            details["exit_code"] = exit_code
        if self.output:
            details["output"] = self.output[-500:]
        super().__init__(message=message, details=details)


class ContainerNotFoundError(RuntimeCommandError):
    """The named container does not exist or is not running."""

    error_code = "CONTAINER_NOT_FOUND"
    message = "Container not found"


class EnvironmentStartupError(HarnessError):
    """The containerized stack could not be brought up."""

    error_code = "ENVIRONMENT_STARTUP_FAILED"
    message = "Stack environment did not become ready"
