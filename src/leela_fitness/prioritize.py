"""Order a suite's tests so that the cheapest run first."""

from __future__ import annotations

from leela_fitness.exceptions import MissingExecutionResultError
from leela_fitness.models import ExecutionResult, TestChromosome, TestSuite


def require_result(test: TestChromosome) -> ExecutionResult:
    """Return the test's last execution result, failing if it never ran."""
    result = test.last_execution_result
    if result is None:
        raise MissingExecutionResultError(test.test_case.name)
    return result


def prioritize_tests(suite: TestSuite) -> list[TestChromosome]:
    """Return the suite's tests sorted by execution time, quickest first.

    Ties keep their original order.  The suite itself is not reordered.
    """
    return sorted(
        suite.test_chromosomes,
        key=lambda test: require_result(test).execution_time,
    )
