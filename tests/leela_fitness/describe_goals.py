"""Tests for leela_fitness.goals — mutation goals and strong mutation scoring."""

import math
from unittest.mock import MagicMock

import pytest

from leela_fitness.exceptions import MutantTimeoutError
from leela_fitness.goals import MutationGoal, strong_mutation_goal
from leela_fitness.models import ExecutionResult, ExecutionTrace, Mutant, TestCase, TestChromosome


def _mutant(mutant_id: int = 4) -> Mutant:
    return Mutant(
        mutant_id=mutant_id, module_name="app", lineno=3, operator="Gt", replacement="GtE"
    )


def _original(outcome="ok") -> tuple[TestChromosome, ExecutionResult]:
    result = ExecutionResult(execution_time=0.01, outcome=outcome)
    return TestChromosome(TestCase("t"), result), result


def describe_mutation_goal():
    def it_returns_the_distance_from_its_strategy():
        goal = MutationGoal(mutant=_mutant(), distance=lambda test, result: 2.5)
        test, result = _original()
        assert goal.evaluate(test, result) == 2.5

    def it_passes_test_and_result_to_the_strategy():
        strategy = MagicMock(return_value=1.0)
        goal = MutationGoal(mutant=_mutant(), distance=strategy)
        test, result = _original()
        goal.evaluate(test, result)
        strategy.assert_called_once_with(test, result)

    def it_rejects_negative_distances():
        goal = MutationGoal(mutant=_mutant(), distance=lambda test, result: -1.0)
        with pytest.raises(ValueError, match="non-negative"):
            goal.evaluate(*_original())

    def it_rejects_nan_distances():
        goal = MutationGoal(mutant=_mutant(), distance=lambda test, result: math.nan)
        with pytest.raises(ValueError):
            goal.evaluate(*_original())


def describe_strong_mutation_goal():
    def it_runs_the_test_against_the_mutant():
        executor = MagicMock()
        executor.execute.return_value = ExecutionResult(execution_time=0.01, outcome="ok")
        mutant = _mutant()
        test, result = _original()

        strong_mutation_goal(mutant, executor).evaluate(test, result)

        executor.execute.assert_called_once_with(test.test_case, mutant)

    def it_kills_when_outcome_differs():
        executor = MagicMock()
        executor.execute.return_value = ExecutionResult(execution_time=0.01, outcome="boom")
        assert strong_mutation_goal(_mutant(), executor).evaluate(*_original("ok")) == 0.0

    def it_scores_survivors_by_infection_distance():
        executor = MagicMock()
        executor.execute.return_value = ExecutionResult(
            execution_time=0.01,
            outcome="ok",
            trace=ExecutionTrace(mutation_distances={4: 2.0}),
        )
        assert strong_mutation_goal(_mutant(4), executor).evaluate(*_original("ok")) == 3.0

    def it_never_scores_a_survivor_as_killed():
        executor = MagicMock()
        executor.execute.return_value = ExecutionResult(execution_time=0.01, outcome="ok")
        assert strong_mutation_goal(_mutant(), executor).evaluate(*_original("ok")) == 1.0

    def it_raises_on_mutant_timeout():
        executor = MagicMock()
        executor.execute.return_value = ExecutionResult(execution_time=5.0, timeout=True)
        mutant = _mutant()
        with pytest.raises(MutantTimeoutError) as exc_info:
            strong_mutation_goal(mutant, executor).evaluate(*_original())
        assert exc_info.value.mutant is mutant
