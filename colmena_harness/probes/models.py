"""Probe result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ProbeKind(str, Enum):
    HTTP = "http"
    DATABASE = "database"


class ProbeOutcome(str, Enum):
    """Exactly one outcome per check."""

    ACCESSIBLE = "accessible"
    CONNECTION_REFUSED = "connection-refused"
    ERROR = "error"


@dataclass
class ProbeResult:
    """Result of a single reachability check."""

    name: str
    target: str
    kind: ProbeKind
    outcome: ProbeOutcome
    status_code: int | None = None
    message: str | None = None

    @classmethod
    def from_error(
        cls, name: str, target: str, kind: ProbeKind, error: Exception
    ) -> "ProbeResult":
        message = getattr(error, "message", None) or str(error) or type(error).__name__
        return cls(name=name, target=target, kind=kind, outcome=ProbeOutcome.ERROR, message=message)

    @property
    def ok(self) -> bool:
        return self.outcome is ProbeOutcome.ACCESSIBLE

    def describe(self) -> str:
        """Short status text for the console report."""
        if self.outcome is ProbeOutcome.CONNECTION_REFUSED:
            return "CONNECTION REFUSED"
        if self.outcome is ProbeOutcome.ERROR:
            return f"ERROR - {self.message or 'unknown error'}"
        if self.kind is ProbeKind.DATABASE:
            return "CONNECTED and RESPONSIVE"
        status = self.status_code if self.status_code is not None else "Unknown"
        return f"HTTP {status} - ACCESSIBLE"


@dataclass
class DiagnosticOutput:
    """Raw output of a best-effort diagnostic command."""

    name: str
    output: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ProbeReport:
    """All results of one probe run, in execution order."""

    results: dict[str, ProbeResult] = field(default_factory=dict)
    core_services: tuple[str, ...] = ()
    diagnostics: list[DiagnosticOutput] = field(default_factory=list)

    def add(self, result: ProbeResult) -> None:
        self.results[result.name] = result

    @property
    def working(self) -> int:
        return sum(1 for r in self.results.values() if r.ok)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def core_ready(self) -> bool:
        """True only when every core service passed."""
        return all(
            name in self.results and self.results[name].ok
            for name in self.core_services
        )

    @property
    def failed(self) -> list[ProbeResult]:
        return [r for r in self.results.values() if not r.ok]
