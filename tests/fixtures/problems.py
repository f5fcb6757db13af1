"""
Problem encodings used across the test suite.

They stand in for the problem-specific collaborators that implement the
Individual contract in real use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence

from evolution.individual import Individual


class Sphere(Individual):
    """Maximize -sum((g - 0.5)^2); optimum at every gene == 0.5."""

    def convert(self, genes: Sequence[float]) -> List[float]:
        return list(genes)

    def evaluate(self, features: Sequence[Any]) -> List[float]:
        return [-sum((f - 0.5) ** 2 for f in features)]


class CountingSphere(Sphere):
    """Sphere on a 3-decimal grid that counts evaluate() calls per key."""

    calls: List[tuple] = []

    def convert(self, genes: Sequence[float]) -> List[float]:
        return [round(g, 3) for g in genes]

    def evaluate(self, features: Sequence[Any]) -> List[float]:
        type(self).calls.append(tuple(features))
        return super().evaluate(features)

    @classmethod
    def reset(cls) -> None:
        cls.calls = []


@dataclass(frozen=True)
class Item:
    value: int
    weight: int
    stock: int


CAPACITY = 50
ITEMS = [
    Item(value=10, weight=1, stock=10),
    Item(value=9, weight=2, stock=10),
    Item(value=8, weight=3, stock=10),
    Item(value=7, weight=4, stock=10),
    Item(value=1, weight=10, stock=10),
]


class Knapsack(Individual):
    """Bounded knapsack: genes pick item counts.

    Evaluations are ``[feasibility, value]``: feasibility is +inf when the
    load fits, otherwise minus the total weight, so any feasible load beats
    any infeasible one and value breaks ties.
    """

    def convert(self, genes: Sequence[float]) -> List[int]:
        return [min(int(g * (item.stock + 1)), item.stock) for g, item in zip(genes, ITEMS)]

    def evaluate(self, features: Sequence[Any]) -> List[float]:
        weight = sum(item.weight * n for item, n in zip(ITEMS, features))
        value = sum(item.value * n for item, n in zip(ITEMS, features))
        feasibility = float("inf") if weight <= CAPACITY else -float(weight)
        return [feasibility, float(value)]
