"""Distance normalisation and per-mutant penalties."""

from __future__ import annotations

import math

# Per-mutant penalties:
#   3    -> not touched by any test
#   1..2 -> touched, infection distance
#   0    -> killed
UNCOVERED_PENALTY = 3.0
KILLED_PENALTY = 0.0


def normalize(distance: float) -> float:
    """Map a non-negative distance into [0, 1], strictly below 1 for finite input."""
    if math.isnan(distance) or distance < 0:
        raise ValueError(f"Distance must be non-negative, got {distance}")
    if math.isinf(distance):
        return 1.0
    return distance / (distance + 1.0)


def infection_penalty(magnitude: float) -> float:
    """Penalty for a mutant that was touched but not killed."""
    return 1.0 + normalize(magnitude)
