"""Errors raised while scoring test suites against mutants."""

from __future__ import annotations

from typing import Any


class FitnessError(Exception):
    """Base class for leela-fitness errors."""


class MissingExecutionResultError(FitnessError):
    """A test was scored before it was executed."""

    def __init__(self, test_name: str) -> None:
        super().__init__(f"Test {test_name!r} has no execution result; run it before scoring")
        self.test_name = test_name


class MutantTimeoutError(FitnessError):
    """Re-executing a test against a mutant exceeded its time budget."""

    def __init__(self, mutant: Any) -> None:
        super().__init__(f"Execution against mutant {mutant.mutant_id} timed out")
        self.mutant = mutant


class ExecutorNotConfiguredError(FitnessError):
    """Tests need to be executed but no executor was supplied."""
