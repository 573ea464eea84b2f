"""Track mutants whose executions keep timing out."""

from __future__ import annotations

import logging
import threading

from leela_fitness.models import Mutant

logger = logging.getLogger(__name__)


class MutationTimeoutTracker:
    """Counts timeouts per mutant and disables mutants that exceed a limit.

    A disabled mutant is skipped by the fitness function: it contributes
    nothing to a suite's fitness and is never solved.
    """

    def __init__(self, max_timeouts: int = 3) -> None:
        self.max_timeouts = max_timeouts
        self._timeouts: dict[int, int] = {}
        self._lock = threading.Lock()

    def record_timeout(self, mutant: Mutant) -> int:
        with self._lock:
            count = self._timeouts.get(mutant.mutant_id, 0) + 1
            self._timeouts[mutant.mutant_id] = count
        if count == self.max_timeouts:
            logger.info("Disabling mutant %d after %d timeouts", mutant.mutant_id, count)
        return count

    def timeouts_for(self, mutant: Mutant) -> int:
        with self._lock:
            return self._timeouts.get(mutant.mutant_id, 0)

    def is_disabled(self, mutant: Mutant) -> bool:
        return self.timeouts_for(mutant) >= self.max_timeouts

    def disabled_ids(self) -> set[int]:
        with self._lock:
            return {
                mutant_id
                for mutant_id, count in self._timeouts.items()
                if count >= self.max_timeouts
            }

    def reset(self) -> None:
        with self._lock:
            self._timeouts.clear()
