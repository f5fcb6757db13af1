"""
Differential evolution engine.

Individuals (genes -> features -> evaluations) are evolved by DE mutation,
binomial crossover and lexicographic competition, with optional
feature-keyed memoization of evaluations that can persist across runs.
"""

from __future__ import annotations

from .individual import Individual
from .rng import RandomStream
from .competition import compare_evaluations, compete, is_better, best_index, get_best
from .operators import STRATEGIES, select_factor_indexes, de_mutate, binomial_crossover
from .memo import MemoCache, CacheStats, canonical_features, encode_key, encode_values, decode_values
from .persistent_cache import PersistentCache, save_memo, load_memo
from .stats import GenerationStats, summarize
from .population import Population, cache_from_settings, evolve

__all__ = [
    # Individual contract
    'Individual',
    # Random stream
    'RandomStream',
    # Competition
    'compare_evaluations',
    'compete',
    'is_better',
    'best_index',
    'get_best',
    # Operators
    'STRATEGIES',
    'select_factor_indexes',
    'de_mutate',
    'binomial_crossover',
    # Memoization
    'MemoCache',
    'CacheStats',
    'canonical_features',
    'encode_key',
    'encode_values',
    'decode_values',
    'PersistentCache',
    'save_memo',
    'load_memo',
    # Population
    'GenerationStats',
    'summarize',
    'Population',
    'cache_from_settings',
    'evolve',
]
