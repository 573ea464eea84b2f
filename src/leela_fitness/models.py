"""Data models for mutation-based suite fitness."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Mutant:
    """A single injected fault in the program under test."""

    mutant_id: int
    module_name: str
    lineno: int
    operator: str  # "Add", "Lt", "Return", etc.
    replacement: str  # "Sub", "LtE", "None", etc.

    @property
    def description(self) -> str:
        return f"{self.module_name}:{self.lineno} {self.operator} -> {self.replacement}"


@dataclass
class ExecutionTrace:
    """Mutants reached by one execution, with any infection distances seen."""

    touched_mutants: set[int] = field(default_factory=set)
    mutation_distances: dict[int, float] = field(default_factory=dict)

    def touches(self, mutant_id: int) -> bool:
        return mutant_id in self.touched_mutants or mutant_id in self.mutation_distances

    @property
    def is_empty(self) -> bool:
        return not self.touched_mutants and not self.mutation_distances


@dataclass
class ExecutionResult:
    """Result of executing a single test case."""

    execution_time: float  # seconds
    timeout: bool = False
    called_reflection: bool = False
    trace: ExecutionTrace = field(default_factory=ExecutionTrace)
    outcome: Any = None  # observable behaviour compared against mutant runs


@dataclass(frozen=True)
class TestCase:
    """A named sequence of program actions."""

    __test__ = False  # not a pytest test class

    name: str
    statements: tuple[Any, ...] = ()


class TestChromosome:
    """A test case together with its last execution result."""

    __test__ = False

    def __init__(
        self,
        test_case: TestCase,
        last_execution_result: ExecutionResult | None = None,
    ) -> None:
        self.test_case = test_case
        self.last_execution_result = last_execution_result
        self.changed = last_execution_result is None
        self._covered_goals: list[Any] = []

    def set_last_execution_result(self, result: ExecutionResult) -> None:
        self.last_execution_result = result
        self.changed = False

    def add_covered_goal(self, goal: Any) -> None:
        if goal not in self._covered_goals:
            self._covered_goals.append(goal)

    @property
    def covered_goals(self) -> list[Any]:
        return list(self._covered_goals)

    def __repr__(self) -> str:
        return f"TestChromosome({self.test_case.name!r})"


class TestSuite:
    """A candidate suite scored as one unit.

    Fitness, coverage and covered-goal counts are stored per fitness
    function so that several objectives can score the same suite.
    """

    __test__ = False

    def __init__(self, tests: list[TestChromosome] | None = None) -> None:
        self.test_chromosomes: list[TestChromosome] = list(tests or [])
        self._fitness: dict[Any, float] = {}
        self._coverage: dict[Any, float] = {}
        self._num_covered_goals: dict[Any, int] = {}

    def add_test(
        self, test_case: TestCase, result: ExecutionResult | None = None
    ) -> TestChromosome:
        chromosome = TestChromosome(test_case, result)
        self.test_chromosomes.append(chromosome)
        return chromosome

    def __len__(self) -> int:
        return len(self.test_chromosomes)

    def set_fitness(self, fitness_function: Any, value: float) -> None:
        self._fitness[fitness_function] = value

    def get_fitness(self, fitness_function: Any) -> float | None:
        return self._fitness.get(fitness_function)

    def set_coverage(self, fitness_function: Any, value: float) -> None:
        self._coverage[fitness_function] = value

    def get_coverage(self, fitness_function: Any) -> float | None:
        return self._coverage.get(fitness_function)

    def set_num_covered_goals(self, fitness_function: Any, value: int) -> None:
        self._num_covered_goals[fitness_function] = value

    def get_num_covered_goals(self, fitness_function: Any) -> int | None:
        return self._num_covered_goals.get(fitness_function)
