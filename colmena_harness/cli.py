"""Entry point for ``colmena-probe``: the one-shot service probe."""

from __future__ import annotations

import asyncio

from colmena_harness.core.config import get_settings
from colmena_harness.core.logging import get_logger, setup_logging
from colmena_harness.probes.report import ProbeReporter
from colmena_harness.probes.service_probe import run_probe

logger = get_logger("cli")


def main() -> None:
    """
    Run the probe and print the report.

    The exit status does not reflect probe failures; the report is the
    output. Unexpected errors are printed instead of propagating.
    """
    reporter = ProbeReporter()
    try:
        settings = get_settings()
        setup_logging(settings)
        asyncio.run(run_probe(settings, reporter=reporter))
    except Exception as e:
        logger.debug("Probe aborted", exc_info=True)
        reporter.error(str(e))


if __name__ == "__main__":
    main()
