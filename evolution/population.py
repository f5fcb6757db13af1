"""
Population and Epoch Loop
=========================

A Population owns a fixed-size list of individuals and one RandomStream.
``advance_epoch`` first evaluates any individual still lacking an evaluation
vector, then runs ``epoch`` generations of DE:

    for each slot i of the current generation (a frozen snapshot):
        mutant = de_mutate(snapshot)
        trial  = binomial_crossover(snapshot[i], mutant)
        resolve trial through the cache (or evaluate it)
        next_generation[i] = compete(snapshot[i], trial)

Every trial of a generation competes against the same snapshot; individuals
are never modified in place mid-generation. Population size and gene length
never change.

Usage:
    population = Population.from_shape(Sphere, size=20, gene_len=5, seed=7,
                                       cache=MemoCache())
    population.advance_epoch(200, "rand", 1, 0.5, 0.5)
    index, best = population.get_best()
"""

from __future__ import annotations

import json
import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union

from config.settings_schema import Settings, load_validated_settings
from core.exceptions import (
    ContractViolationError,
    GeneLengthMismatchError,
    InsufficientPopulationError,
    ParameterViolationError,
)
from core.structured_log import jlog
from evolution.competition import best_index, compete, get_best
from evolution.individual import Individual
from evolution.memo import MemoCache, resolve_uncached
from evolution.operators import binomial_crossover, de_mutate, validate_strategy
from evolution.persistent_cache import PersistentCache
from evolution.rng import RandomStream
from evolution.stats import GenerationStats, summarize

logger = logging.getLogger(__name__)


class Population:
    """Fixed-size population of individuals plus its owned random stream."""

    def __init__(
        self,
        individuals: Sequence[Individual],
        seed: int = 0,
        cache: Optional[MemoCache] = None,
        emit_events: bool = False,
    ):
        """
        Initialize the population.

        Args:
            individuals: Initial individuals; all must share one gene length
            seed: Seed for the owned random stream
            cache: Evaluation memo; ``None`` evaluates every trial
            emit_events: Write JSON-lines run events via ``jlog``
        """
        self._individuals: List[Individual] = list(individuals)
        self._check_shape()
        self.rng = RandomStream(seed)
        self.cache = cache
        self.emit_events = emit_events
        self.generation = 0
        self.evaluation_count = 0
        self.history: List[GenerationStats] = []

    def _check_shape(self) -> None:
        if not self._individuals:
            raise ParameterViolationError("A population needs at least one individual")
        gene_len = len(self._individuals[0].genes)
        if gene_len == 0:
            raise ParameterViolationError("Individuals need at least one gene")
        for i, ind in enumerate(self._individuals):
            if len(ind.genes) != gene_len:
                raise GeneLengthMismatchError(
                    "Individuals in one population must share a gene length",
                    context={"expected": gene_len, "got": len(ind.genes), "index": i},
                )
            if any(not 0.0 <= g <= 1.0 for g in ind.genes):
                raise ContractViolationError(
                    "Gene values must lie in [0, 1]",
                    context={"index": i},
                )

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_shape(
        cls,
        individual_cls: Type[Individual],
        size: int,
        gene_len: int,
        seed: int = 0,
        cache: Optional[MemoCache] = None,
        emit_events: bool = False,
    ) -> Population:
        """Random population drawn from ``seed``.

        Genes come from an init stream seeded with ``seed``; the population's
        own stream is then seeded from one more draw of that init stream.
        """
        init = RandomStream(seed)
        individuals = [individual_cls.from_genes(init.genes(gene_len)) for _ in range(size)]
        return cls(individuals, seed=init.spawn_seed(), cache=cache, emit_events=emit_events)

    @classmethod
    def from_settings(
        cls,
        individual_cls: Type[Individual],
        gene_len: int,
        settings: Optional[Settings] = None,
        cache: Optional[MemoCache] = None,
    ) -> Population:
        """Random population shaped and seeded by validated settings."""
        settings = settings or load_validated_settings()
        if cache is None:
            cache = cache_from_settings(settings)
        return cls.from_shape(
            individual_cls,
            size=settings.population.size,
            gene_len=gene_len,
            seed=settings.population.seed,
            cache=cache,
            emit_events=settings.logging.events_enabled,
        )

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def individuals(self) -> Tuple[Individual, ...]:
        return tuple(self._individuals)

    @property
    def size(self) -> int:
        return len(self._individuals)

    @property
    def gene_len(self) -> int:
        return len(self._individuals[0].genes)

    @property
    def is_steady(self) -> bool:
        """True once every individual carries an evaluation vector."""
        return not any(ind.needs_evaluation for ind in self._individuals)

    def get_best(self) -> Tuple[int, Individual]:
        """(index, individual) of the best evaluated individual."""
        return get_best(self._individuals)

    def set_random_seed(self, seed: int) -> None:
        self.rng.reseed(seed)

    def get_convergence_history(self) -> Dict[str, List[float]]:
        """Best and mean primary objective per recorded generation."""
        return {
            'best': [s.best for s in self.history],
            'avg': [s.mean for s in self.history],
        }

    # =========================================================================
    # Evolution
    # =========================================================================

    def _resolve(self, individual: Individual) -> Individual:
        if self.cache is None:
            self.evaluation_count += 1
            return resolve_uncached(individual)
        misses = self.cache.misses
        self.cache.resolve(individual)
        self.evaluation_count += self.cache.misses - misses
        return individual

    def _evaluate_pending(self) -> int:
        pending = [ind for ind in self._individuals if ind.needs_evaluation]
        for ind in pending:
            self._resolve(ind)
        return len(pending)

    def _record_generation(self) -> GenerationStats:
        stats = summarize(
            self._individuals,
            generation=self.generation,
            evaluations=self.evaluation_count,
            cache_size=len(self.cache) if self.cache is not None else 0,
        )
        self.history.append(stats)
        return stats

    def _next_generation(
        self,
        strategy: str,
        difference_vector_count: int,
        f_scale: float,
        crossover_rate: float,
    ) -> None:
        snapshot = tuple(self._individuals)
        best = best_index(snapshot) if strategy == "best" else None

        next_individuals: List[Individual] = []
        for parent in snapshot:
            mutant = de_mutate(snapshot, strategy, difference_vector_count, f_scale, self.rng, best_index=best)
            trial = binomial_crossover(parent, mutant, crossover_rate, self.rng)
            self._resolve(trial)
            next_individuals.append(compete(parent, trial))

        self._individuals = next_individuals
        self.generation += 1

    def advance_epoch(
        self,
        epoch: int,
        strategy: str = "rand",
        difference_vector_count: int = 1,
        f_scale: float = 0.5,
        crossover_rate: float = 0.5,
    ) -> Population:
        """
        Evaluate pending individuals, then run ``epoch`` generations.

        Args:
            epoch: Number of generations to run (0 only evaluates)
            strategy: "rand" or "best" base vector
            difference_vector_count: Difference pairs per mutant (k)
            f_scale: Difference scale F
            crossover_rate: Binomial crossover rate in [0, 1)

        Returns:
            self, for chaining
        """
        validate_strategy(strategy)
        needed = 1 + 2 * difference_vector_count
        if epoch > 0 and needed >= self.size:
            raise InsufficientPopulationError(
                "Mutation needs more distinct individuals than the population holds",
                context={"needed": needed, "population_size": self.size},
            )

        logger.info(
            f"Advancing {epoch} epochs: size={self.size}, genes={self.gene_len}, "
            f"strategy={strategy}, k={difference_vector_count}, F={f_scale}, CR={crossover_rate}"
        )
        if self.emit_events:
            jlog("epoch_start", epoch=epoch, generation=self.generation, strategy=strategy,
                 difference_vector_count=difference_vector_count, f_scale=f_scale,
                 crossover_rate=crossover_rate, size=self.size)

        session = self.cache.session() if isinstance(self.cache, PersistentCache) else nullcontext()
        with session:
            evaluated = self._evaluate_pending()
            if evaluated or not self.history:
                self._record_generation()

            for _ in range(epoch):
                self._next_generation(strategy, difference_vector_count, f_scale, crossover_rate)
                stats = self._record_generation()
                logger.debug(
                    f"Gen {stats.generation}: best={stats.best:.6g}, "
                    f"avg={stats.mean:.6g}, std={stats.std:.6g}"
                )
                if self.emit_events:
                    jlog("generation_complete", **stats.to_dict())

        best = self.history[-1]
        logger.info(
            f"Epoch advance complete at generation {self.generation}: "
            f"best={best.best:.6g}, evaluations={self.evaluation_count}"
        )
        if self.emit_events:
            jlog("epoch_complete", generation=self.generation, best=best.best,
                 evaluations=self.evaluation_count)
        return self

    # =========================================================================
    # Snapshot
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {"individuals": [ind.to_dict() for ind in self._individuals]}

    def save_to_json(self, path: Union[str, Path]) -> None:
        """Write the individuals (not the random stream) to ``path``."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_from_json(
        cls,
        path: Union[str, Path],
        individual_cls: Type[Individual],
        seed: int,
        cache: Optional[MemoCache] = None,
        emit_events: bool = False,
    ) -> Population:
        """Rebuild a saved population; the random stream restarts from ``seed``."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        individuals = [individual_cls.from_dict(d) for d in data["individuals"]]
        return cls(individuals, seed=seed, cache=cache, emit_events=emit_events)

    def __repr__(self) -> str:
        return f"Population(size={self.size}, genes={self.gene_len}, generation={self.generation})"


def cache_from_settings(settings: Settings) -> Optional[MemoCache]:
    """Build the evaluation cache described by ``settings.cache``."""
    if not settings.cache.enabled:
        return None
    if settings.cache.path:
        return PersistentCache(settings.cache.path, allow_missing=settings.cache.allow_missing)
    return MemoCache()


def evolve(
    individual_cls: Type[Individual],
    gene_len: int,
    epochs: Optional[int] = None,
    settings: Optional[Settings] = None,
    cache: Optional[MemoCache] = None,
) -> Population:
    """
    Convenience function: build a population from settings and evolve it.

    Args:
        individual_cls: Problem type implementing the Individual contract
        gene_len: Number of genes per individual
        epochs: Generations to run (defaults to ``population.epochs``)
        settings: Validated settings (loaded from base.yaml when omitted)
        cache: Override the cache described by the settings

    Returns:
        The evolved Population
    """
    settings = settings or load_validated_settings()
    population = Population.from_settings(individual_cls, gene_len, settings, cache=cache)
    de = settings.de
    population.advance_epoch(
        settings.population.epochs if epochs is None else epochs,
        strategy=de.strategy,
        difference_vector_count=de.difference_vector_count,
        f_scale=de.f_scale,
        crossover_rate=de.crossover_rate,
    )
    return population
