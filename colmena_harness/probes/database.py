"""Database reachability probe via ``psql`` inside the database container."""

from __future__ import annotations

import asyncio

from colmena_harness.core.exceptions import HarnessError
from colmena_harness.core.logging import get_logger
from colmena_harness.probes.models import ProbeKind, ProbeOutcome, ProbeResult
from colmena_harness.runtime.base import ContainerRuntime

logger = get_logger("probes.database")

DATABASE_CHECK_NAME = "PostgreSQL Database"


class DatabaseProbe:
    """
    Run a trivial query inside the database container.

    Passes only when the output contains the marker string selected by
    the query; no retry.
    """

    def __init__(
        self,
        runtime: ContainerRuntime,
        container: str,
        user: str,
        database: str,
        marker: str = "Database OK",
        name: str = DATABASE_CHECK_NAME,
    ):
        self.runtime = runtime
        self.container = container
        self.user = user
        self.database = database
        self.marker = marker
        self.name = name

    @property
    def command(self) -> list[str]:
        return [
            "psql", "-U", self.user, "-d", self.database,
            "-c", f"SELECT '{self.marker}' as status;",
        ]

    async def probe(self) -> ProbeResult:
        try:
            result = await asyncio.to_thread(
                self.runtime.exec_in_container, self.container, self.command
            )
        except HarnessError as e:
            logger.debug("Database exec failed: %s", e.to_dict())
            return self._result(ProbeOutcome.ERROR, e.message)
        except Exception as e:
            logger.debug("Database exec raised %r", e, exc_info=True)
            return self._result(ProbeOutcome.ERROR, str(e) or type(e).__name__)

        if not result.succeeded:
            detail = result.output.strip().splitlines()[-1:] or [""]
            return self._result(
                ProbeOutcome.ERROR,
                f"psql exited with {result.exit_code}: {detail[0]}".rstrip(": "),
            )

        if self.marker not in result.output:
            return self._result(
                ProbeOutcome.ERROR, f"query output did not contain '{self.marker}'"
            )

        return self._result(ProbeOutcome.ACCESSIBLE)

    def _result(self, outcome: ProbeOutcome, message: str | None = None) -> ProbeResult:
        return ProbeResult(
            name=self.name,
            target=f"{self.container}/{self.database}",
            kind=ProbeKind.DATABASE,
            outcome=outcome,
            message=message,
        )
