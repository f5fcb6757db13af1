"""Per-generation statistics over the primary objective."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Sequence

import numpy as np

from evolution.competition import get_best
from evolution.individual import Individual


@dataclass
class GenerationStats:
    """Summary of one generation."""
    generation: int
    best: float
    mean: float
    std: float
    worst: float
    best_evaluations: list
    evaluations: int = 0
    cache_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize(
    individuals: Sequence[Individual],
    generation: int,
    evaluations: int = 0,
    cache_size: int = 0,
) -> GenerationStats:
    """Statistics of an evaluated generation.

    ``best`` is the first component of the lexicographic best; mean, std and
    worst are over the first component only.
    """
    primary = np.array([ind.evaluations[0] for ind in individuals], dtype=float)
    _, best = get_best(individuals)
    return GenerationStats(
        generation=generation,
        best=float(best.evaluations[0]),
        mean=float(np.mean(primary)),
        std=float(np.std(primary)),
        worst=float(np.min(primary)),
        best_evaluations=list(best.evaluations),
        evaluations=evaluations,
        cache_size=cache_size,
    )
