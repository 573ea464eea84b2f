"""Mutation goals: a mutant plus the means of scoring a test against it."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from leela_fitness.exceptions import MutantTimeoutError
from leela_fitness.execution import TestExecutor
from leela_fitness.models import ExecutionResult, Mutant, TestChromosome

logger = logging.getLogger(__name__)

DistanceFunction = Callable[[TestChromosome, ExecutionResult], float]


@dataclass(frozen=True)
class MutationGoal:
    """One goal per mutant.

    ``distance`` returns 0.0 when the test kills the mutant and a positive
    value otherwise; lower values are closer to a kill.
    """

    mutant: Mutant
    distance: DistanceFunction

    def evaluate(self, test: TestChromosome, result: ExecutionResult) -> float:
        value = self.distance(test, result)
        if math.isnan(value) or value < 0:
            raise ValueError(
                f"Distance for mutant {self.mutant.mutant_id} must be non-negative, got {value}"
            )
        return value


def strong_mutation_goal(mutant: Mutant, executor: TestExecutor) -> MutationGoal:
    """Goal that re-executes the test against the mutant.

    The mutant is killed when the mutant run's outcome differs from the
    outcome of the original run.  A surviving mutant scores one plus the
    infection distance observed in the mutant run.
    """

    def distance(test: TestChromosome, result: ExecutionResult) -> float:
        logger.debug("Executing %s against mutant %s", test.test_case.name, mutant.description)
        mutant_result = executor.execute(test.test_case, mutant)
        if mutant_result.timeout:
            raise MutantTimeoutError(mutant)
        if mutant_result.outcome != result.outcome:
            return 0.0
        return 1.0 + mutant_result.trace.mutation_distances.get(mutant.mutant_id, 0.0)

    return MutationGoal(mutant=mutant, distance=distance)
