"""Tests for the container runtime collaborators."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock

import docker
import pytest

from colmena_harness.core.config import Settings
from colmena_harness.core.exceptions import (
    ContainerNotFoundError,
    RuntimeCommandError,
    RuntimeUnavailableError,
)
from colmena_harness.runtime import resolve_runtime
from colmena_harness.runtime.compose_cli import ComposeCliRuntime
from colmena_harness.runtime.docker_sdk import (
    CONFIG_FILES_LABEL,
    PROJECT_LABEL,
    SERVICE_LABEL,
    DockerSdkRuntime,
)


def _completed(returncode: int = 0, stdout: str = "", stderr: str = ""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def _container(
    name: str,
    service: str,
    status: str = "running",
    config_file: str = "/srv/colmena/docker-compose.local.yml",
    health: str | None = None,
    ports: dict | None = None,
) -> MagicMock:
    container = MagicMock()
    container.name = name
    container.status = status
    container.labels = {
        PROJECT_LABEL: "colmena",
        SERVICE_LABEL: service,
        CONFIG_FILES_LABEL: config_file,
    }
    container.attrs = {"State": {"Health": {"Status": health}} if health else {}}
    container.ports = ports or {}
    return container


# =============================================================================
# Compose CLI runtime
# =============================================================================


class TestComposeCliRuntime:

    def test_exec_builds_docker_exec_command(self, settings: Settings):
        runner = MagicMock(return_value=_completed(stdout=" Database OK\n"))
        runtime = ComposeCliRuntime(settings, runner=runner)

        result = runtime.exec_in_container("colmena_postgres", ["psql", "-c", "SELECT 1"])

        assert result.succeeded
        assert result.output == " Database OK\n"
        cmd = runner.call_args.args[0]
        assert cmd == ["docker", "exec", "colmena_postgres", "psql", "-c", "SELECT 1"]
        assert runner.call_args.kwargs["capture_output"] is True

    def test_exec_missing_container(self, settings: Settings):
        runner = MagicMock(return_value=_completed(
            returncode=1,
            stderr="Error response from daemon: No such container: colmena_postgres",
        ))
        runtime = ComposeCliRuntime(settings, runner=runner)

        with pytest.raises(ContainerNotFoundError):
            runtime.exec_in_container("colmena_postgres", ["psql"])

    def test_exec_nonzero_keeps_stderr(self, settings: Settings):
        runner = MagicMock(return_value=_completed(returncode=2, stderr="psql: error"))
        runtime = ComposeCliRuntime(settings, runner=runner)

        result = runtime.exec_in_container("colmena_postgres", ["psql"])

        assert result.exit_code == 2
        assert "psql: error" in result.output

    def test_compose_status_command(self, settings: Settings):
        runner = MagicMock(return_value=_completed(stdout="NAME  STATUS\n"))
        runtime = ComposeCliRuntime(settings, runner=runner)

        assert runtime.compose_status() == "NAME  STATUS\n"
        assert runner.call_args.args[0] == [
            "docker", "compose", "-f", "docker-compose.local.yml", "ps", "--format", "table",
        ]

    def test_service_logs_command(self, settings: Settings):
        runner = MagicMock(return_value=_completed(stdout="colmena-app  | ready\n"))
        runtime = ComposeCliRuntime(settings, runner=runner)

        runtime.service_logs("colmena-app", tail=10)

        assert runner.call_args.args[0][-3:] == ["logs", "colmena-app", "--tail=10"]

    def test_failed_command_raises(self, settings: Settings):
        runner = MagicMock(return_value=_completed(returncode=1, stderr="no configuration file provided"))
        runtime = ComposeCliRuntime(settings, runner=runner)

        with pytest.raises(RuntimeCommandError, match="no configuration file provided") as exc:
            runtime.compose_status()

        assert exc.value.exit_code == 1

    def test_missing_executable(self, settings: Settings):
        runner = MagicMock(side_effect=FileNotFoundError("docker"))
        runtime = ComposeCliRuntime(settings, runner=runner)

        with pytest.raises(RuntimeCommandError, match="Executable not found: docker"):
            runtime.compose_status()

    def test_timeout(self, settings: Settings):
        runner = MagicMock(side_effect=subprocess.TimeoutExpired(cmd="docker", timeout=60))
        runtime = ComposeCliRuntime(settings, runner=runner)

        with pytest.raises(RuntimeCommandError, match="timed out"):
            runtime.service_logs("colmena-app")

    def test_compose_up_uses_startup_timeout(self, settings: Settings):
        runner = MagicMock(return_value=_completed())
        runtime = ComposeCliRuntime(settings, runner=runner)

        runtime.compose_up()

        assert runner.call_args.args[0][-2:] == ["up", "-d"]
        assert runner.call_args.kwargs["timeout"] == settings.stack_startup_timeout


# =============================================================================
# Docker SDK runtime
# =============================================================================


class TestDockerSdkRuntime:

    def _runtime(self, settings: Settings, client: MagicMock) -> DockerSdkRuntime:
        return DockerSdkRuntime(settings, client, ComposeCliRuntime(settings, runner=MagicMock()))

    def test_exec_decodes_output(self, settings: Settings):
        container = _container("colmena_postgres", "postgres")
        container.exec_run.return_value = (0, b" Database OK\n")
        client = MagicMock()
        client.containers.get.return_value = container

        result = self._runtime(settings, client).exec_in_container("colmena_postgres", ["psql"])

        assert result.succeeded
        assert "Database OK" in result.output
        container.exec_run.assert_called_once_with(["psql"])

    def test_exec_container_not_found(self, settings: Settings):
        client = MagicMock()
        client.containers.get.side_effect = docker.errors.NotFound("no such container")

        with pytest.raises(ContainerNotFoundError):
            self._runtime(settings, client).exec_in_container("colmena_postgres", ["psql"])

    def test_exec_container_stopped(self, settings: Settings):
        client = MagicMock()
        client.containers.get.return_value = _container("colmena_postgres", "postgres", status="exited")

        with pytest.raises(ContainerNotFoundError, match="status: exited"):
            self._runtime(settings, client).exec_in_container("colmena_postgres", ["psql"])

    def test_compose_status_table(self, settings: Settings):
        client = MagicMock()
        client.containers.list.return_value = [
            _container(
                "colmena_app", "colmena-app", health="healthy",
                ports={"80/tcp": [{"HostIp": "0.0.0.0", "HostPort": "7180"}]},
            ),
            _container("colmena_postgres", "postgres"),
            _container("other_app", "web", config_file="/srv/other/docker-compose.yml"),
        ]

        table = self._runtime(settings, client).compose_status()

        lines = table.splitlines()
        assert lines[0].split() == ["NAME", "SERVICE", "STATUS", "PORTS"]
        assert "running (healthy)" in lines[1]
        assert "0.0.0.0:7180->80/tcp" in lines[1]
        assert "colmena_postgres" in lines[2]
        assert "other_app" not in table
        client.containers.list.assert_called_once_with(all=True, filters={"label": PROJECT_LABEL})

    def test_compose_status_filters_by_project(self, clean_env):
        settings = Settings(_env_file=None, compose_project="colmena")
        client = MagicMock()
        client.containers.list.return_value = []

        self._runtime(settings, client).compose_status()

        client.containers.list.assert_called_once_with(
            all=True, filters={"label": f"{PROJECT_LABEL}=colmena"}
        )

    def test_service_logs(self, settings: Settings):
        app = _container("colmena_app", "colmena-app")
        app.logs.return_value = b"Booting worker\nListening at: http://0.0.0.0:8000\n"
        client = MagicMock()
        client.containers.list.return_value = [app, _container("colmena_postgres", "postgres")]

        logs = self._runtime(settings, client).service_logs("colmena-app", tail=10)

        assert logs.splitlines() == [
            "colmena_app  | Booting worker",
            "colmena_app  | Listening at: http://0.0.0.0:8000",
        ]
        app.logs.assert_called_once_with(tail=10, stdout=True, stderr=True)

    def test_service_logs_unknown_service(self, settings: Settings):
        client = MagicMock()
        client.containers.list.return_value = []

        with pytest.raises(ContainerNotFoundError, match="colmena-app"):
            self._runtime(settings, client).service_logs("colmena-app")

    def test_compose_up_delegates_to_cli(self, settings: Settings):
        cli = MagicMock()
        runtime = DockerSdkRuntime(settings, MagicMock(), cli)

        runtime.compose_up()

        cli.compose_up.assert_called_once_with()


# =============================================================================
# Runtime resolution
# =============================================================================


class TestResolveRuntime:

    def test_sdk_when_daemon_answers(self, settings: Settings):
        client = MagicMock()

        runtime = resolve_runtime(settings, client_factory=lambda: client)

        assert isinstance(runtime, DockerSdkRuntime)
        client.ping.assert_called_once()

    def test_cli_fallback_when_daemon_unreachable(self, settings: Settings):
        def factory():
            raise docker.errors.DockerException("Error while fetching server API version")

        runtime = resolve_runtime(settings, client_factory=factory)

        assert isinstance(runtime, ComposeCliRuntime)

    def test_cli_forced(self, clean_env):
        settings = Settings(_env_file=None, runtime_backend="cli")
        factory = MagicMock()

        runtime = resolve_runtime(settings, client_factory=factory)

        assert isinstance(runtime, ComposeCliRuntime)
        factory.assert_not_called()

    def test_sdk_forced_but_unavailable(self, clean_env):
        settings = Settings(_env_file=None, runtime_backend="sdk")
        client = MagicMock()
        client.ping.side_effect = ConnectionRefusedError("connection refused")

        with pytest.raises(RuntimeUnavailableError):
            resolve_runtime(settings, client_factory=lambda: client)
