"""
Failure Report - JSON report written when a browser test fails.

Playwright already keeps trace, screenshot and video. This report adds
what the browser cannot see: the recent logs of the application
service at the moment of failure, with error lines pulled out.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

ERROR_PATTERN = re.compile(
    r"ERROR|CRITICAL|FATAL|Traceback \(most recent call last\)|HTTP 5\d{2}",
    re.IGNORECASE,
)


@dataclass
class FailureReport:
    """Structured report for a failed browser test."""

    test_id: str  # Full pytest node ID
    test_name: str
    test_start: datetime
    test_end: datetime
    assertion_error: str | None = None

    # Application service logs captured after the failure
    service: str | None = None
    service_logs: list[str] = field(default_factory=list)
    log_error: str | None = None

    @property
    def error_lines(self) -> list[str]:
        return [line for line in self.service_logs if ERROR_PATTERN.search(line)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "test_id": self.test_id,
            "test_name": self.test_name,
            "test_start": self.test_start.isoformat(),
            "test_end": self.test_end.isoformat(),
            "duration_seconds": (self.test_end - self.test_start).total_seconds(),
            "summary": self._generate_summary(),
            "assertion_error": self.assertion_error,
            "service": self.service,
            "service_errors": self.error_lines,
            "service_logs": self.service_logs,
            "log_error": self.log_error,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)

    def save(self, directory: Path | str = "test-results/failure-reports") -> Path:
        """Save report to a JSON file and return the path."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        safe_name = re.sub(r"[^\w.-]+", "_", self.test_name)
        timestamp = self.test_start.strftime("%Y%m%d_%H%M%S")
        filepath = directory / f"{safe_name}_{timestamp}.json"
        filepath.write_text(self.to_json())

        return filepath

    def _generate_summary(self) -> str:
        parts = []

        if self.assertion_error:
            first_line = self.assertion_error.strip().splitlines()[0] if self.assertion_error.strip() else ""
            parts.append(f"Assertion: {first_line[:100]}")

        errors = self.error_lines
        if errors:
            parts.append(f"{len(errors)} error line(s) in {self.service} logs")

        if self.log_error:
            parts.append(f"Logs unavailable: {self.log_error[:80]}")

        return " | ".join(parts) if parts else "Unknown failure"
