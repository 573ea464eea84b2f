"""Search-wide archive of solved mutation goals.

Each goal gets its own record, addressed by mutant id and guarded by its
own lock, so concurrent suite evaluations only contend on the goal they
are updating.  Solved records are never unsolved and a record's best
distance only ever decreases.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from leela_fitness.models import ExecutionResult

if TYPE_CHECKING:
    from leela_fitness.goals import MutationGoal

logger = logging.getLogger(__name__)


@dataclass
class _GoalRecord:
    lock: threading.Lock = field(default_factory=threading.Lock)
    solved: bool = False
    best_distance: float = math.inf
    best_result: ExecutionResult | None = None


class CoverageArchive:
    """Solved-goal set and best-known partial solutions, keyed by mutant id."""

    def __init__(self) -> None:
        self._records: dict[int, _GoalRecord] = {}
        self._registry_lock = threading.Lock()

    def _record(self, goal: MutationGoal) -> _GoalRecord:
        mutant_id = goal.mutant.mutant_id
        record = self._records.get(mutant_id)
        if record is None:
            with self._registry_lock:
                record = self._records.setdefault(mutant_id, _GoalRecord())
        return record

    def has_solution(self, goal: MutationGoal) -> bool:
        record = self._records.get(goal.mutant.mutant_id)
        return record is not None and record.solved

    def update(
        self, goal: MutationGoal, result: ExecutionResult, distance: float
    ) -> bool:
        """Offer a result for a goal.

        ``distance`` is the per-goal penalty (0 for a kill, otherwise in
        (1, 2]), so results from trace distances and from re-execution
        compare on one scale.  The result is kept only if its distance is
        strictly lower than the best seen so far.  A distance of zero solves
        the goal.  Returns True only for the call that solved the goal.
        """
        record = self._record(goal)
        with record.lock:
            if record.solved or distance >= record.best_distance:
                return False
            record.best_distance = distance
            record.best_result = result
            if distance == 0.0:
                record.solved = True
                logger.debug("Archive: mutant %d solved", goal.mutant.mutant_id)
                return True
            return False

    def best_distance(self, goal: MutationGoal) -> float:
        record = self._records.get(goal.mutant.mutant_id)
        return math.inf if record is None else record.best_distance

    def solution(self, goal: MutationGoal) -> ExecutionResult | None:
        record = self._records.get(goal.mutant.mutant_id)
        if record is None or not record.solved:
            return None
        return record.best_result

    def solved_ids(self) -> set[int]:
        with self._registry_lock:
            records = list(self._records.items())
        return {mutant_id for mutant_id, record in records if record.solved}

    @property
    def num_solved(self) -> int:
        return len(self.solved_ids())

    def reset(self) -> None:
        with self._registry_lock:
            self._records.clear()


_default_archive = CoverageArchive()


def default_archive() -> CoverageArchive:
    """Return the process-wide archive shared by all fitness functions."""
    return _default_archive
