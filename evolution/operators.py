"""
Differential-evolution operators.

Free functions over the Individual contract; all random draws come from the
RandomStream passed in, in a fixed order:

1. ``select_factor_indexes`` draws integers until it has ``1 + 2k`` distinct ones
2. ``binomial_crossover`` draws the forced donor index, then one uniform per gene
"""

from __future__ import annotations

from typing import List, Optional, Sequence, TypeVar

import numpy as np

from core.exceptions import (
    GeneLengthMismatchError,
    InsufficientPopulationError,
    ParameterViolationError,
    UnknownStrategyError,
)
from evolution.competition import best_index as _best_index
from evolution.individual import Individual
from evolution.rng import RandomStream

T = TypeVar("T", bound=Individual)

STRATEGIES = ("rand", "best")


def validate_strategy(strategy: str) -> None:
    if strategy not in STRATEGIES:
        raise UnknownStrategyError(
            f"Unknown mutation strategy: {strategy!r}",
            context={"allowed": "|".join(STRATEGIES)},
        )


def select_factor_indexes(population_size: int, count: int, rng: RandomStream) -> List[int]:
    """Draw ``count`` distinct indexes uniformly, in draw order.

    Choosing the whole population leaves nothing random to pick, so
    ``count`` must be strictly smaller than ``population_size``.
    """
    if count >= population_size:
        raise InsufficientPopulationError(
            "Mutation needs more distinct individuals than the population holds",
            context={"needed": count, "population_size": population_size},
        )
    chosen = set()
    indexes: List[int] = []
    while len(indexes) != count:
        index = rng.integer(population_size)
        if index not in chosen:
            chosen.add(index)
            indexes.append(index)
    return indexes


def de_mutate(
    individuals: Sequence[T],
    strategy: str,
    difference_vector_count: int,
    f_scale: float,
    rng: RandomStream,
    best_index: Optional[int] = None,
) -> T:
    """Build a mutant ``base + F * sum(a_j - b_j)`` clamped to [0, 1].

    With strategy ``best`` the base vector is the current best individual;
    the random draw is adjusted so exactly ``k`` difference pairs remain.
    ``best_index`` may be passed when the caller already knows it.
    """
    validate_strategy(strategy)
    if difference_vector_count < 0:
        raise ParameterViolationError(
            "difference_vector_count must be >= 0",
            context={"difference_vector_count": difference_vector_count},
        )

    indexes = select_factor_indexes(len(individuals), 1 + 2 * difference_vector_count, rng)

    if strategy == "best":
        best = _best_index(individuals) if best_index is None else best_index
        if best in indexes:
            indexes.remove(best)
        else:
            indexes.pop()
        indexes.insert(0, best)

    genes_len = len(individuals[0].genes)
    factors = []
    for index in indexes:
        genes = individuals[index].genes
        if len(genes) != genes_len:
            raise GeneLengthMismatchError(
                "Individuals in one population must share a gene length",
                context={"expected": genes_len, "got": len(genes), "index": index},
            )
        factors.append(np.asarray(genes, dtype=float))

    mutant = factors[0].copy()
    for j in range(difference_vector_count):
        mutant += f_scale * (factors[1 + 2 * j] - factors[2 + 2 * j])
    mutant = np.clip(mutant, 0.0, 1.0)

    return type(individuals[0]).from_genes([float(g) for g in mutant])


def binomial_crossover(parent: T, mutant: Individual, crossover_rate: float, rng: RandomStream) -> T:
    """Cross ``parent`` with ``mutant`` into a fresh, unevaluated trial.

    One gene index is always taken from the mutant, so the trial can differ
    from the parent even with ``crossover_rate == 0``.
    """
    if not 0.0 <= crossover_rate < 1.0:
        raise ParameterViolationError(
            "crossover_rate must lie in [0, 1)",
            context={"crossover_rate": crossover_rate},
        )
    genes_len = len(parent.genes)
    if len(mutant.genes) != genes_len:
        raise GeneLengthMismatchError(
            "Parent and mutant gene lengths differ",
            context={"parent": genes_len, "mutant": len(mutant.genes)},
        )

    forced = rng.integer(genes_len)
    take_mutant = rng.random_vector(genes_len) < crossover_rate
    take_mutant[forced] = True

    genes = [
        m if use else p
        for p, m, use in zip(parent.genes, mutant.genes, take_mutant)
    ]
    return type(parent).from_genes(genes)
