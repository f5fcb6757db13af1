"""
Individual contract for candidates evolved by differential evolution.

Problem types subclass Individual and supply two pure functions:

- ``convert(genes)`` decodes a gene vector (reals in [0, 1]) into the
  problem's feature vector. The feature vector doubles as the cache key.
- ``evaluate(features)`` scores a feature vector. It may be expensive and
  is called at most once per distinct feature key when a cache is used.

Evaluation vectors compare lexicographically and LARGER IS BETTER: the
first component is the primary objective, later ones break ties.
An empty evaluation vector means the individual still needs evaluation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from evolution.competition import is_better

T = TypeVar("T", bound="Individual")


class Individual(ABC):
    """A candidate: genes, decoded features and evaluation vector."""

    def __init__(
        self,
        genes: Optional[Sequence[float]] = None,
        features: Optional[Sequence[Any]] = None,
        evaluations: Optional[Sequence[float]] = None,
    ):
        self.genes: List[float] = [float(g) for g in genes] if genes is not None else []
        self.features: List[Any] = list(features) if features is not None else []
        self.evaluations: List[float] = [float(v) for v in evaluations] if evaluations is not None else []

    @classmethod
    def from_genes(cls: Type[T], genes: Sequence[float]) -> T:
        """Fresh, unevaluated individual carrying only ``genes``."""
        return cls(genes=genes)

    @abstractmethod
    def convert(self, genes: Sequence[float]) -> List[Any]:
        """Decode genes into the feature vector. Must be pure and total."""

    @abstractmethod
    def evaluate(self, features: Sequence[Any]) -> List[float]:
        """Score a feature vector. Must be pure in ``features``."""

    @property
    def needs_evaluation(self) -> bool:
        return len(self.evaluations) == 0

    @property
    def gene_len(self) -> int:
        return len(self.genes)

    def is_better_than(self, other: Individual) -> bool:
        return is_better(self.evaluations, other.evaluations)

    def copy(self: T) -> T:
        return type(self)(
            genes=self.genes,
            features=self.features,
            evaluations=self.evaluations,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "genes": list(self.genes),
            "features": list(self.features),
            "evaluations": list(self.evaluations),
        }

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        return cls(
            genes=data.get("genes", []),
            features=data.get("features", []),
            evaluations=data.get("evaluations", []),
        )

    def __repr__(self) -> str:
        status = "evaluated" if not self.needs_evaluation else "pending"
        return f"{type(self).__name__}(genes={len(self.genes)}, {status})"
