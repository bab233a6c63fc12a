"""
Runner configuration for the browser integration suite.

Translates the suite's execution policy into pytest arguments:
timeouts, CI-dependent retries and parallelism, failure artifacts,
the browser matrix and the HTML report.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Sequence

import pytest

from colmena_harness.core.config import Settings, get_settings
from colmena_harness.core.exceptions import HarnessError
from colmena_harness.core.logging import get_logger, setup_logging
from colmena_harness.environment import bootstrap_stack

logger = get_logger("runner")

# Browser engine -> Playwright device descriptor used for its context
DEVICE_PROFILES: dict[str, str] = {
    "chromium": "Desktop Chrome",
    "firefox": "Desktop Firefox",
    "webkit": "Desktop Safari",
}


@dataclass
class RunnerConfig:
    """Execution policy for ``system_tests``."""

    ci: bool = False
    test_dir: str = "system_tests"
    test_timeout: float = 30.0
    expect_timeout: float = 5.0
    browsers: tuple[str, ...] = field(default_factory=lambda: tuple(DEVICE_PROFILES))
    base_url: str = "http://localhost:7180"
    output_dir: str = "test-results"
    report_path: str = "playwright-report/index.html"

    @classmethod
    def from_settings(cls, settings: Settings) -> "RunnerConfig":
        return cls(ci=settings.ci, base_url=settings.frontend_url)

    @property
    def retries(self) -> int:
        return 2 if self.ci else 0

    @property
    def workers(self) -> str:
        return "1" if self.ci else "auto"

    def pytest_args(self, extra: Sequence[str] = ()) -> list[str]:
        args = [
            self.test_dir,
            f"--timeout={self.test_timeout:g}",
            f"--reruns={self.retries}",
            f"--numprocesses={self.workers}",
            f"--base-url={self.base_url}",
            f"--output={self.output_dir}",
            "--tracing=retain-on-failure",
            "--screenshot=only-on-failure",
            "--video=retain-on-failure",
            f"--html={self.report_path}",
            "--self-contained-html",
        ]
        for browser in self.browsers:
            args.append(f"--browser={browser}")
        if self.ci:
            args.append("--strict-markers")
        args.extend(extra)
        return args


def main(argv: Sequence[str] | None = None) -> int:
    """
    Entry point for ``colmena-e2e``; extra arguments go to pytest.

    Brings the compose stack up before pytest starts. Returns 1 without
    running any test when the stack cannot be started.
    """
    settings = get_settings()
    setup_logging(settings)

    try:
        state = bootstrap_stack(settings)
    except HarnessError as e:
        print(f"[FAIL] {e.message}", file=sys.stderr)
        print(
            f"\nStart the stack with:\n  {' '.join(settings.compose_argv)} up -d",
            file=sys.stderr,
        )
        return 1
    logger.info("Stack %s", state.value)

    config = RunnerConfig.from_settings(settings)
    args = config.pytest_args(sys.argv[1:] if argv is None else argv)
    logger.info("pytest %s", " ".join(args))
    return int(pytest.main(args))


if __name__ == "__main__":
    sys.exit(main())
