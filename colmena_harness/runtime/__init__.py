"""Container runtime collaborators: docker SDK first, compose CLI as fallback."""

from __future__ import annotations

from typing import Callable

import docker

from colmena_harness.core.config import Settings
from colmena_harness.core.exceptions import RuntimeUnavailableError
from colmena_harness.core.logging import get_logger
from colmena_harness.runtime.base import ContainerRuntime, ExecResult
from colmena_harness.runtime.compose_cli import ComposeCliRuntime
from colmena_harness.runtime.docker_sdk import DockerSdkRuntime

logger = get_logger("runtime")


def resolve_runtime(
    settings: Settings,
    client_factory: Callable[[], docker.DockerClient] = docker.from_env,
) -> ContainerRuntime:
    """Pick the container runtime according to ``settings.runtime_backend``."""
    cli = ComposeCliRuntime(settings)
    if settings.runtime_backend == "cli":
        return cli

    try:
        client = client_factory()
        client.ping()
    except (docker.errors.DockerException, OSError) as e:
        if settings.runtime_backend == "sdk":
            raise RuntimeUnavailableError(f"Docker daemon not reachable: {e}") from e
        logger.info("Docker SDK unavailable (%s), using compose CLI", e)
        return cli

    return DockerSdkRuntime(settings, client, cli)


__all__ = [
    "ComposeCliRuntime",
    "ContainerRuntime",
    "DockerSdkRuntime",
    "ExecResult",
    "resolve_runtime",
]
