"""
Service Probe - one-shot reachability report for the whole stack.

Runs strictly in order: HTTP probes for every registry entry, the
database check, the summary, then the compose status and application
log diagnostics. Every external call is fault-isolated; nothing is
retried.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Awaitable, Callable

import httpx

from colmena_harness.core.config import Settings
from colmena_harness.core.exceptions import HarnessError
from colmena_harness.core.logging import check_name_var, get_logger
from colmena_harness.probes.database import DatabaseProbe
from colmena_harness.probes.http_probe import CurlProber, HttpProber, HttpxProber
from colmena_harness.probes.models import (
    DiagnosticOutput,
    ProbeKind,
    ProbeReport,
    ProbeResult,
)
from colmena_harness.probes.report import ProbeReporter
from colmena_harness.runtime import resolve_runtime
from colmena_harness.runtime.base import ContainerRuntime

logger = get_logger("probes.service")


class ServiceProbe:
    """Sequential probe run over the configured service registry."""

    def __init__(
        self,
        settings: Settings,
        runtime: ContainerRuntime,
        http_prober: HttpProber,
        reporter: ProbeReporter,
    ):
        self.settings = settings
        self.runtime = runtime
        self.http_prober = http_prober
        self.reporter = reporter
        self.database_probe = DatabaseProbe(
            runtime,
            container=settings.database_container,
            user=settings.database_user,
            database=settings.database_name,
            marker=settings.database_marker,
        )

    async def run(self) -> ProbeReport:
        report = ProbeReport(core_services=tuple(self.settings.core_services))
        self.reporter.header()

        for name, url in self.settings.services.items():
            result = await self._check(
                name, url, ProbeKind.HTTP, partial(self.http_prober.probe, name, url)
            )
            logger.info("%s -> %s", url, result.outcome.value)
            report.add(result)
            self.reporter.result(result)

        result = await self._check(
            self.database_probe.name,
            f"{self.settings.database_container}/{self.settings.database_name}",
            ProbeKind.DATABASE,
            self.database_probe.probe,
        )
        report.add(result)
        self.reporter.result(result)

        self.reporter.summary(report)

        await self._diagnose(report, "Docker Services Status", self.runtime.compose_status)
        await self._diagnose(
            report,
            f"{self.settings.app_service} Recent Logs",
            partial(
                self.runtime.service_logs,
                self.settings.app_service,
                tail=self.settings.log_tail,
            ),
        )

        self.reporter.next_steps(report)
        return report

    async def _check(
        self,
        name: str,
        target: str,
        kind: ProbeKind,
        probe: Callable[[], Awaitable[ProbeResult]],
    ) -> ProbeResult:
        """Run one check; any exception becomes an ERROR row for that check."""
        token = check_name_var.set(name)
        try:
            return await probe()
        except Exception as e:
            logger.debug("Check '%s' raised %r", name, e, exc_info=True)
            return ProbeResult.from_error(name, target, kind, e)
        finally:
            check_name_var.reset(token)

    async def _diagnose(
        self, report: ProbeReport, name: str, command: Callable[[], str]
    ) -> None:
        """Run a best-effort diagnostic; failures never affect the counts."""
        try:
            output = await asyncio.to_thread(command)
            diagnostic = DiagnosticOutput(name=name, output=output)
        except HarnessError as e:
            logger.info("Diagnostic '%s' failed: %s", name, e.message)
            diagnostic = DiagnosticOutput(name=name, error=e.message)
        except Exception as e:
            logger.debug("Diagnostic '%s' raised %r", name, e, exc_info=True)
            diagnostic = DiagnosticOutput(name=name, error=str(e) or type(e).__name__)
        report.diagnostics.append(diagnostic)
        self.reporter.diagnostic(diagnostic)


async def run_probe(
    settings: Settings,
    reporter: ProbeReporter | None = None,
    runtime: ContainerRuntime | None = None,
) -> ProbeReport:
    """Build the collaborators from settings and run one probe."""
    reporter = reporter or ProbeReporter()
    runtime = runtime or await asyncio.to_thread(resolve_runtime, settings)
    logger.info("Using %s container runtime", runtime.name)

    try:
        async with httpx.AsyncClient(
            timeout=settings.probe_timeout, follow_redirects=False
        ) as client:
            if settings.http_probe_backend == "curl":
                prober: HttpProber = CurlProber(timeout=settings.probe_timeout)
            else:
                prober = HttpxProber(client)
            return await ServiceProbe(settings, runtime, prober, reporter).run()
    finally:
        runtime.close()
