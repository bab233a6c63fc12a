"""
System test fixtures package.
"""

from system_tests.fixtures.preconditions import (
    PreconditionCheck,
    StepOutcome,
    evaluate,
    require,
)

__all__ = [
    "PreconditionCheck",
    "StepOutcome",
    "evaluate",
    "require",
]
