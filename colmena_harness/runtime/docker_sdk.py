"""Docker SDK runtime - talks to the daemon API directly."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import docker

from colmena_harness.core.config import Settings
from colmena_harness.core.exceptions import ContainerNotFoundError, RuntimeCommandError
from colmena_harness.core.logging import get_logger
from colmena_harness.runtime.base import ExecResult
from colmena_harness.runtime.compose_cli import ComposeCliRuntime

if TYPE_CHECKING:
    from docker.models.containers import Container

logger = get_logger("runtime.sdk")

PROJECT_LABEL = "com.docker.compose.project"
SERVICE_LABEL = "com.docker.compose.service"
CONFIG_FILES_LABEL = "com.docker.compose.project.config_files"


class DockerSdkRuntime:
    """
    Container runtime backed by the docker SDK.

    Compose services are discovered through the labels compose puts on
    every container, so status and logs need no compose binary. Bringing
    the stack up is delegated to the CLI runtime.
    """

    name = "sdk"

    def __init__(
        self,
        settings: Settings,
        client: docker.DockerClient,
        compose: ComposeCliRuntime,
    ):
        self.settings = settings
        self.client = client
        self._compose = compose

    def exec_in_container(self, container: str, command: Sequence[str]) -> ExecResult:
        try:
            target = self.client.containers.get(container)
        except docker.errors.NotFound as e:
            raise ContainerNotFoundError(
                f"Container '{container}' not found", command=command
            ) from e
        except docker.errors.DockerException as e:
            raise RuntimeCommandError(
                f"Error looking up container '{container}': {e}", command=command
            ) from e

        if target.status != "running":
            raise ContainerNotFoundError(
                f"Container '{container}' is not running (status: {target.status})",
                command=command,
            )

        try:
            exit_code, output = target.exec_run(list(command))
        except docker.errors.APIError as e:
            raise RuntimeCommandError(
                f"exec failed in '{container}': {e}", command=command
            ) from e

        return ExecResult(
            exit_code=exit_code,
            output=output.decode("utf-8", errors="replace") if output else "",
        )

    def compose_status(self) -> str:
        containers = self._compose_containers()
        if not containers:
            return f"No containers found for {self.settings.compose_file}"

        rows = [("NAME", "SERVICE", "STATUS", "PORTS")]
        for container in sorted(containers, key=lambda c: c.name):
            rows.append((
                container.name,
                container.labels.get(SERVICE_LABEL, ""),
                self._status_text(container),
                self._ports_text(container),
            ))

        widths = [max(len(row[i]) for row in rows) for i in range(3)]
        return "\n".join(
            "   ".join(
                [*(cell.ljust(widths[i]) for i, cell in enumerate(row[:3])), row[3]]
            ).rstrip()
            for row in rows
        )

    def service_logs(self, service: str, tail: int = 10) -> str:
        matches = [
            c for c in self._compose_containers()
            if c.labels.get(SERVICE_LABEL) == service
        ]
        if not matches:
            raise ContainerNotFoundError(
                f"No container for compose service '{service}'"
            )

        lines = []
        for container in matches:
            try:
                raw = container.logs(tail=tail, stdout=True, stderr=True)
            except docker.errors.APIError as e:
                raise RuntimeCommandError(
                    f"Error fetching logs for '{container.name}': {e}"
                ) from e
            text = raw.decode("utf-8", errors="replace")
            lines.extend(f"{container.name}  | {line}" for line in text.splitlines())
        return "\n".join(lines)

    def compose_up(self) -> None:
        self._compose.compose_up()

    def close(self) -> None:
        self.client.close()

    def _compose_containers(self) -> list["Container"]:
        project = self.settings.compose_project
        label = f"{PROJECT_LABEL}={project}" if project else PROJECT_LABEL
        try:
            containers = self.client.containers.list(all=True, filters={"label": label})
        except docker.errors.DockerException as e:
            raise RuntimeCommandError(f"Error listing containers: {e}") from e

        if project:
            return containers

        # Without a project name, match on the compose file that created them
        compose_name = Path(self.settings.compose_file).name
        return [
            c for c in containers
            if compose_name in {
                Path(p).name for p in c.labels.get(CONFIG_FILES_LABEL, "").split(",") if p
            }
        ]

    @staticmethod
    def _status_text(container: "Container") -> str:
        health = container.attrs.get("State", {}).get("Health", {})
        if health:
            return f"{container.status} ({health.get('Status', 'unknown')})"
        return container.status

    @staticmethod
    def _ports_text(container: "Container") -> str:
        published = []
        for port, bindings in (container.ports or {}).items():
            for binding in bindings or []:
                published.append(f"{binding['HostIp']}:{binding['HostPort']}->{port}")
        return ", ".join(published)
