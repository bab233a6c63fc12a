"""
Container Runtime - narrow interface over Docker and Compose.

The probe and the browser suite only need four operations from the
container world. Both implementations raise HarnessError subclasses
instead of leaking docker/subprocess exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable


@dataclass
class ExecResult:
    """Result of a command executed inside a container."""

    exit_code: int
    output: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@runtime_checkable
class ContainerRuntime(Protocol):
    """Operations the harness performs against the container stack."""

    name: str

    def exec_in_container(self, container: str, command: Sequence[str]) -> ExecResult:
        """Run a command inside a running container."""
        ...

    def compose_status(self) -> str:
        """Return a status table of the compose services."""
        ...

    def service_logs(self, service: str, tail: int = 10) -> str:
        """Return the last ``tail`` log lines of a compose service."""
        ...

    def compose_up(self) -> None:
        """Bring up the compose stack detached."""
        ...

    def close(self) -> None:
        """Release any client resources."""
        ...
