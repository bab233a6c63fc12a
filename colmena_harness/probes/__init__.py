"""Service probe: HTTP, database and compose diagnostics."""

from .database import DATABASE_CHECK_NAME, DatabaseProbe
from .http_probe import CurlProber, HttpxProber, parse_status_line
from .models import DiagnosticOutput, ProbeKind, ProbeOutcome, ProbeReport, ProbeResult
from .report import ProbeReporter
from .service_probe import ServiceProbe, run_probe

__all__ = [
    "DATABASE_CHECK_NAME",
    "CurlProber",
    "DatabaseProbe",
    "DiagnosticOutput",
    "HttpxProber",
    "ProbeKind",
    "ProbeOutcome",
    "ProbeReport",
    "ProbeReporter",
    "ProbeResult",
    "ServiceProbe",
    "parse_status_line",
    "run_probe",
]
