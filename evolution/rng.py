"""
Seeded random stream owned by a population.

Every stochastic decision of the engine (initial genes, factor index
selection, crossover draws) goes through one RandomStream, so the same seed
and epoch count reproduce the same population.
"""

from __future__ import annotations

from typing import List

import numpy as np


class RandomStream:
    """Thin handle around ``numpy.random.Generator``."""

    def __init__(self, seed: int = 0):
        self.seed = int(seed)
        self._rng = np.random.default_rng(self.seed)

    def reseed(self, seed: int) -> None:
        """Restart the stream from an explicit seed."""
        self.seed = int(seed)
        self._rng = np.random.default_rng(self.seed)

    def random(self) -> float:
        """Uniform variate in [0, 1)."""
        return float(self._rng.random())

    def random_vector(self, n: int) -> np.ndarray:
        """``n`` uniform variates in [0, 1)."""
        return self._rng.random(n)

    def integer(self, high: int) -> int:
        """Uniform integer in [0, high)."""
        return int(self._rng.integers(0, high))

    def genes(self, n: int) -> List[float]:
        """A fresh gene vector of length ``n``."""
        return [float(g) for g in self._rng.random(n)]

    def spawn_seed(self) -> int:
        """Derive a seed for another stream from this one."""
        return int(self._rng.integers(0, 2**63 - 1))

    def __repr__(self) -> str:
        return f"RandomStream(seed={self.seed})"

