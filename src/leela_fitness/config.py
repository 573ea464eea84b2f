"""Configuration for mutation suite fitness."""

from __future__ import annotations

from dataclasses import dataclass

from leela_fitness.distance import UNCOVERED_PENALTY


@dataclass
class FitnessConfig:
    """Tunable behaviour of a mutation suite fitness function."""

    use_archive: bool = True
    max_mutation_timeouts: int = 3
    uncovered_penalty: float = UNCOVERED_PENALTY

    def __post_init__(self) -> None:
        if self.max_mutation_timeouts < 1:
            raise ValueError(
                f"max_mutation_timeouts must be at least 1, got {self.max_mutation_timeouts}"
            )
        # Must stay above the worst touched-but-not-killed penalty (2.0)
        if self.uncovered_penalty <= 2.0:
            raise ValueError(
                f"uncovered_penalty must be greater than 2.0, got {self.uncovered_penalty}"
            )
