"""
Lexicographic competition between evaluation vectors.

Larger is better. The first differing component decides; later components
only break ties of earlier ones. An exact tie promotes the challenger.
"""

from __future__ import annotations

from typing import Sequence, Tuple, TYPE_CHECKING

from core.exceptions import EvaluationLengthMismatchError

if TYPE_CHECKING:
    from evolution.individual import Individual


def compare_evaluations(a: Sequence[float], b: Sequence[float]) -> int:
    """Return 1 if ``a`` is better, -1 if ``b`` is better, 0 on a tie."""
    if len(a) != len(b):
        raise EvaluationLengthMismatchError(
            "Cannot compare evaluation vectors of different lengths",
            context={"left": len(a), "right": len(b)},
        )
    for x, y in zip(a, b):
        if x > y:
            return 1
        if x < y:
            return -1
    return 0


def is_better(a: Sequence[float], b: Sequence[float]) -> bool:
    """True when ``a`` is strictly better than ``b``."""
    return compare_evaluations(a, b) > 0


def compete(parent: Individual, trial: Individual) -> Individual:
    """Return the survivor of parent vs trial.

    The parent survives only if strictly better; ties go to the trial.
    """
    if is_better(parent.evaluations, trial.evaluations):
        return parent
    return trial


def best_index(individuals: Sequence[Individual]) -> int:
    """Index of the best individual; the highest index wins ties."""
    best = 0
    for i in range(1, len(individuals)):
        if not is_better(individuals[best].evaluations, individuals[i].evaluations):
            best = i
    return best


def get_best(individuals: Sequence[Individual]) -> Tuple[int, Individual]:
    i = best_index(individuals)
    return i, individuals[i]
