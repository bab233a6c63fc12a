"""Console rendering of a probe run."""

from __future__ import annotations

import sys
from typing import TextIO

from colmena_harness.probes.models import DiagnosticOutput, ProbeReport, ProbeResult

RULE = "=" * 50
PASS = "[PASS]"
FAIL = "[FAIL]"


class ProbeReporter:
    """Writes the human-readable probe report to a text stream."""

    def __init__(self, stream: TextIO | None = None, title: str = "ColmenaOS"):
        self.stream = stream or sys.stdout
        self.title = title

    def header(self) -> None:
        self._print(f"{self.title} Service Accessibility Test\n")
        self._print(RULE)

    def result(self, result: ProbeResult) -> None:
        marker = PASS if result.ok else FAIL
        self._print(f"{marker} {result.name}: {result.describe()}")

    def summary(self, report: ProbeReport) -> None:
        self._print("\n" + RULE)
        self._print("TEST SUMMARY:")
        self._print(RULE)
        self._print(f"Working Services: {report.working}/{report.total}")
        if report.core_ready:
            self._print("READY FOR AUTHENTICATION TESTING")
        else:
            self._print("CORE SERVICES NOT ACCESSIBLE - Cannot test authentication")

    def diagnostic(self, diagnostic: DiagnosticOutput) -> None:
        if diagnostic.ok:
            self._print(f"\n{diagnostic.name}:")
            self._print(diagnostic.output or "")
        else:
            self._print(f"{FAIL} {diagnostic.name}: {diagnostic.error}")

    def next_steps(self, report: ProbeReport) -> None:
        self._print("\n" + RULE)
        self._print("Next Steps:")
        if not report.core_ready:
            self._print("1. Fix container configuration issues for the core services")
            self._print("2. Rebuild the Docker image with proper nginx/Django setup")
            self._print("3. Re-run this probe to verify fixes: colmena-probe")
            self._print("4. Run full browser authentication tests: colmena-e2e")
        else:
            self._print(f"{PASS} All core services ready - Run: colmena-e2e")

    def error(self, message: str) -> None:
        self._print(f"{FAIL} Probe aborted: {message}")

    def _print(self, text: str) -> None:
        print(text, file=self.stream)
