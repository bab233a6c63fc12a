"""
HTTP reachability probes.

Any HTTP response counts as reachable, whatever its status code: the
probe answers "is something listening and speaking HTTP", not "is the
service healthy".
"""

from __future__ import annotations

import asyncio
import re
from typing import Protocol

import httpx

from colmena_harness.core.logging import get_logger
from colmena_harness.probes.models import ProbeKind, ProbeOutcome, ProbeResult

logger = get_logger("probes.http")

STATUS_LINE = re.compile(r"HTTP/[\d.]+\s+(\d+)")
RESPONSE_MARKER = "HTTP/"


def parse_status_line(text: str) -> int | None:
    """Extract the status code from the first HTTP status line, if any."""
    match = STATUS_LINE.search(text)
    return int(match.group(1)) if match else None


class HttpProber(Protocol):
    async def probe(self, name: str, url: str) -> ProbeResult:
        ...


class HttpxProber:
    """HEAD request through an httpx async client."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def probe(self, name: str, url: str) -> ProbeResult:
        try:
            response = await self.client.head(url)
        except httpx.ConnectError as e:
            logger.debug("%s refused connection: %s", url, e)
            return _result(name, url, ProbeOutcome.CONNECTION_REFUSED, message=str(e))
        except httpx.HTTPError as e:
            logger.debug("%s probe failed: %r", url, e)
            return ProbeResult.from_error(name, url, ProbeKind.HTTP, e)
        except Exception as e:
            logger.debug("%s probe raised %r", url, e, exc_info=True)
            return ProbeResult.from_error(name, url, ProbeKind.HTTP, e)

        return _result(name, url, ProbeOutcome.ACCESSIBLE, status_code=response.status_code)


class CurlProber:
    """``curl -I`` subprocess probe, parsing the raw status line."""

    def __init__(self, timeout: float = 5.0, executable: str = "curl"):
        self.timeout = timeout
        self.executable = executable

    async def probe(self, name: str, url: str) -> ProbeResult:
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable, "-I", "-s", "--max-time", str(self.timeout), url,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
            stdout, _ = await process.communicate()
        except Exception as e:
            logger.debug("curl probe of %s raised %r", url, e, exc_info=True)
            return ProbeResult.from_error(name, url, ProbeKind.HTTP, e)

        return self.interpret(name, url, stdout.decode("utf-8", errors="replace"))

    @staticmethod
    def interpret(name: str, url: str, headers: str) -> ProbeResult:
        if RESPONSE_MARKER not in headers:
            return _result(name, url, ProbeOutcome.CONNECTION_REFUSED)
        return _result(
            name, url, ProbeOutcome.ACCESSIBLE, status_code=parse_status_line(headers)
        )


def _result(
    name: str,
    url: str,
    outcome: ProbeOutcome,
    status_code: int | None = None,
    message: str | None = None,
) -> ProbeResult:
    return ProbeResult(
        name=name,
        target=url,
        kind=ProbeKind.HTTP,
        outcome=outcome,
        status_code=status_code,
        message=message,
    )