"""Interfaces of the collaborators a mutation fitness function relies on."""

from __future__ import annotations

from typing import Protocol

from leela_fitness.models import ExecutionResult, Mutant, TestCase, TestSuite


class TestExecutor(Protocol):
    """Runs a test case, optionally against a mutant."""

    __test__ = False

    def execute(self, test_case: TestCase, mutant: Mutant | None = None) -> ExecutionResult:
        ...


class StructuralFitness(Protocol):
    """Baseline structural (e.g. branch coverage) fitness of a suite."""

    max_fitness: float

    def compute_fitness(self, suite: TestSuite) -> float:
        ...


class NullStructuralFitness:
    """Structural fitness that contributes nothing, for pure mutation scoring.

    Its maximum is 0, so a timed-out suite scores the same as a suite that
    touches no mutant.  Supply a structural fitness with a positive
    ``max_fitness`` to rank timed-out suites strictly last.
    """

    max_fitness = 0.0

    def compute_fitness(self, suite: TestSuite) -> float:
        return 0.0
