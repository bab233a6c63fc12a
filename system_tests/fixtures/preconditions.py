"""
Preconditions - explicit tri-state outcome for conditional test steps.

Several flows only make sense when the UI renders a given control
(login form, logout button, data table). Instead of silently skipping
the assertions, each such step evaluates a PreconditionCheck and ends
in exactly one of: passed, failed, skipped-precondition-absent. Absent
preconditions show up in the pytest report as skips with a reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pytest


class StepOutcome(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped-precondition-absent"


@dataclass
class PreconditionCheck:
    """Whether a UI precondition holds, with context for the report."""

    name: str
    present: bool
    detail: str = ""

    @property
    def reason(self) -> str:
        text = f"precondition absent: {self.name}"
        return f"{text} ({self.detail})" if self.detail else text


def evaluate(check: PreconditionCheck, required: bool = False) -> StepOutcome:
    """
    Decide the step outcome for a precondition.

    A present precondition lets the step proceed (PASSED, pending its own
    assertions). An absent one is FAILED when the precondition is
    required, SKIPPED otherwise.
    """
    if check.present:
        return StepOutcome.PASSED
    return StepOutcome.FAILED if required else StepOutcome.SKIPPED


def require(check: PreconditionCheck, required: bool = False) -> StepOutcome:
    """Enforce a precondition inside a test: fail or skip when absent."""
    outcome = evaluate(check, required)
    if outcome is StepOutcome.FAILED:
        pytest.fail(check.reason)
    if outcome is StepOutcome.SKIPPED:
        pytest.skip(check.reason)
    return outcome
