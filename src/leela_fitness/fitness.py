"""Strong mutation fitness for whole test suites."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, NamedTuple

from leela_fitness.archive import CoverageArchive, default_archive
from leela_fitness.config import FitnessConfig
from leela_fitness.distance import KILLED_PENALTY, infection_penalty
from leela_fitness.exceptions import ExecutorNotConfiguredError, MutantTimeoutError
from leela_fitness.execution import NullStructuralFitness, StructuralFitness, TestExecutor
from leela_fitness.goals import MutationGoal
from leela_fitness.models import ExecutionResult, Mutant, TestCase, TestSuite
from leela_fitness.prioritize import prioritize_tests, require_result
from leela_fitness.timeouts import MutationTimeoutTracker

logger = logging.getLogger(__name__)


class SuiteScore(NamedTuple):
    """Outcome of scoring one suite.  Lower fitness is better."""

    fitness: float
    killed: int  # goals killed by this suite in this evaluation
    total_goals: int
    coverage: float
    timed_out: bool = False


class MutationSuiteFitness:
    """Scores suites by how close their tests come to killing each mutant.

    Fitness is the structural baseline plus, for every open goal, the best
    penalty any test in the suite achieved against it.  Goals that are
    killed, here or by an earlier suite, leave the open set for good.
    """

    def __init__(
        self,
        goals: Iterable[MutationGoal],
        structural: StructuralFitness | None = None,
        executor: TestExecutor | None = None,
        archive: CoverageArchive | None = None,
        timeouts: MutationTimeoutTracker | None = None,
        config: FitnessConfig | None = None,
    ) -> None:
        self.config = config if config is not None else FitnessConfig()
        self.structural = structural if structural is not None else NullStructuralFitness()
        self.executor = executor
        self.archive = archive if archive is not None else default_archive()
        self.timeouts = (
            timeouts
            if timeouts is not None
            else MutationTimeoutTracker(self.config.max_mutation_timeouts)
        )
        self._goals: dict[int, MutationGoal] = {}
        for goal in goals:
            self._goals[goal.mutant.mutant_id] = goal
        self._open_goals = dict(self._goals)
        self._lock = threading.Lock()

    @property
    def num_goals(self) -> int:
        return len(self._goals)

    @property
    def num_open_goals(self) -> int:
        with self._lock:
            return len(self._open_goals)

    @property
    def num_killed(self) -> int:
        """Goals solved so far in the whole search."""
        return self.num_goals - self.num_open_goals

    @property
    def coverage(self) -> float:
        if self.num_goals == 0:
            return 1.0
        return self.num_killed / self.num_goals

    def open_goals(self) -> list[MutationGoal]:
        with self._lock:
            return list(self._open_goals.values())

    def run_test(self, test_case: TestCase, mutant: Mutant | None = None) -> ExecutionResult:
        if self.executor is None:
            raise ExecutorNotConfiguredError("No executor configured to run tests")
        return self.executor.execute(test_case, mutant)

    def run_test_suite(self, suite: TestSuite) -> None:
        """Execute every test that changed or has never been run."""
        for test in suite.test_chromosomes:
            if test.changed or test.last_execution_result is None:
                test.set_last_execution_result(self.run_test(test.test_case))

    def get_fitness(self, suite: TestSuite) -> float:
        self.run_test_suite(suite)
        return self.score(suite).fitness

    def _close_goals(self, mutant_ids: Iterable[int]) -> None:
        with self._lock:
            for mutant_id in mutant_ids:
                self._open_goals.pop(mutant_id, None)

    def _scorable_goals(self) -> dict[int, MutationGoal]:
        """Snapshot of open goals, dropping those the archive has solved."""
        with self._lock:
            snapshot = dict(self._open_goals)
        solved = [
            mutant_id
            for mutant_id, goal in snapshot.items()
            if self.archive.has_solution(goal)
        ]
        self._close_goals(solved)
        for mutant_id in solved:
            del snapshot[mutant_id]
        return {
            mutant_id: goal
            for mutant_id, goal in snapshot.items()
            if not self.timeouts.is_disabled(goal.mutant)
        }

    def _timed_out(self, suite: TestSuite, killed: int = 0) -> SuiteScore:
        """Worst-case score: structural maximum plus the full penalty for
        every goal still open.  Kills made before the timeout stand.
        """
        num_goals = len(self._scorable_goals())
        fitness = self.structural.max_fitness + self.config.uncovered_penalty * num_goals
        logger.info("Test case has timed out, setting fitness to max value %s", fitness)
        score = SuiteScore(
            fitness=fitness,
            killed=killed,
            total_goals=self.num_goals,
            coverage=0.0,
            timed_out=True,
        )
        self.update_individual(suite, score)
        return score

    def score(self, suite: TestSuite) -> SuiteScore:
        """Compute, record and return the fitness of an executed suite."""
        results = [require_result(test) for test in suite.test_chromosomes]

        if any(result.timeout for result in results):
            logger.debug("Skipping suite with timed out test")
            return self._timed_out(suite)

        fitness = self.structural.compute_fitness(suite)

        goals = self._scorable_goals()
        min_penalty = {mutant_id: self.config.uncovered_penalty for mutant_id in goals}
        removed: set[int] = set()
        killed: set[int] = set()
        checked = 0

        for test in prioritize_tests(suite):
            result = require_result(test)
            # Reflection results only count towards structural fitness
            if result.called_reflection:
                logger.debug("Skipping %s: used reflection", test.test_case.name)
                continue

            trace = result.trace
            if trace.is_empty:
                continue

            for mutant_id, goal in goals.items():
                if mutant_id in removed:
                    continue
                if self.archive.has_solution(goal):
                    removed.add(mutant_id)
                    continue
                if self.timeouts.is_disabled(goal.mutant):
                    logger.debug("Skipping timed out mutation %d", mutant_id)
                    continue
                if not trace.touches(mutant_id):
                    continue

                checked += 1
                magnitude = trace.mutation_distances.get(mutant_id, 0.0)
                if magnitude == 0.0:
                    try:
                        magnitude = goal.evaluate(test, result)
                    except MutantTimeoutError:
                        self.timeouts.record_timeout(goal.mutant)
                        self._close_goals(removed)
                        return self._timed_out(suite, len(killed))

                if magnitude == 0.0:
                    penalty = KILLED_PENALTY
                    removed.add(mutant_id)
                    killed.add(mutant_id)
                    test.add_covered_goal(goal)
                else:
                    penalty = infection_penalty(magnitude)

                if self.config.use_archive:
                    self.archive.update(goal, result, penalty)

                min_penalty[mutant_id] = min(penalty, min_penalty[mutant_id])

        self._close_goals(removed)

        fitness += sum(
            penalty
            for mutant_id, penalty in min_penalty.items()
            if mutant_id not in removed
        )

        logger.debug(
            "Mutants killed: %d, Checked: %d, Goals: %d",
            self.num_killed,
            checked,
            self.num_goals,
        )

        score = SuiteScore(
            fitness=fitness,
            killed=len(killed),
            total_goals=self.num_goals,
            coverage=self.coverage,
        )
        self.update_individual(suite, score)
        return score

    def update_individual(self, suite: TestSuite, score: SuiteScore) -> None:
        suite.set_fitness(self, score.fitness)
        suite.set_coverage(self, score.coverage)
        suite.set_num_covered_goals(self, score.killed)
