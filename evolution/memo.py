"""
Feature-keyed memoization of evaluation vectors.

Keys are the feature vector joined with ``,``; values are the evaluation
vector joined the same way. A record in the persisted form is
``key:v1,v2,...``, so ``:``, ``,`` and line breaks are reserved and may not
appear inside a field's own text.

Feature values are canonicalized before rendering, so a key does not depend
on whether a value arrived as a Python or numpy scalar:

- bool (incl. ``numpy.bool_``) renders as ``True`` / ``False``
- integers (incl. ``numpy.integer``) render as ``int``, e.g. ``3``
- other reals (incl. ``numpy.floating``) render as ``repr(float)``, e.g. ``3.0``
- strings render quoted, e.g. ``'3'``

Each kind has its own text shape, which keeps keys injective across types.
Anything else raises UnsupportedFieldError.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from core.exceptions import (
    CacheFormatError,
    CacheParseError,
    ContractViolationError,
    ReservedDelimiterError,
    UnsupportedFieldError,
)
from evolution.competition import compare_evaluations
from evolution.individual import Individual


KEY_VALUE_DELIMITER = ":"
FIELD_DELIMITER = ","
RESERVED = (KEY_VALUE_DELIMITER, FIELD_DELIMITER, "\n", "\r")


def canonical_value(value: Any) -> Any:
    """Plain Python bool, int, float or str for one feature value."""
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str):
        return str(value)
    raise UnsupportedFieldError(
        "Feature values must be numbers, bools or strings",
        context={"type": type(value).__name__},
    )


def canonical_features(features: Iterable[Any]) -> List[Any]:
    """Canonicalize a feature vector (any iterable, including an ndarray)."""
    return [canonical_value(f) for f in features]


def _field_text(value: Any) -> str:
    value = canonical_value(value)
    if isinstance(value, (bool, int)):
        text = str(value)
    else:
        text = repr(value)
    if any(d in text for d in RESERVED):
        raise ReservedDelimiterError(
            "Cache field text contains a reserved delimiter",
            context={"field": text},
        )
    return text


def encode_key(features: Iterable[Any]) -> str:
    """Stringify a feature vector into its cache key."""
    return FIELD_DELIMITER.join(_field_text(f) for f in features)


def encode_values(evaluations: Iterable[float]) -> str:
    """Stringify an evaluation vector."""
    return FIELD_DELIMITER.join(_field_text(float(v)) for v in evaluations)


def decode_values(text: str) -> List[float]:
    """Parse an encoded evaluation vector. Failure is fatal for the entry."""
    if text == "":
        raise CacheParseError("Stored evaluation vector is empty")
    try:
        return [float(v) for v in text.split(FIELD_DELIMITER)]
    except ValueError as e:
        raise CacheParseError(
            "Stored evaluation vector does not parse",
            context={"value": text},
            cause=e,
        ) from e


def format_record(key: str, text: str) -> str:
    """One persisted line: ``key:v1,v2,...``."""
    return f"{key}{KEY_VALUE_DELIMITER}{text}"


def parse_record(line: str) -> Tuple[str, str]:
    """Split a persisted line into key and encoded values.

    Only the shape is checked here; values are parsed when they are read.
    """
    parts = line.split(KEY_VALUE_DELIMITER)
    if len(parts) != 2 or parts[1] == "":
        raise CacheFormatError(
            "Cache line is not of the form key:v1,v2,...",
            context={"line": line},
        )
    return parts[0], parts[1]


@dataclass
class CacheStats:
    entries: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class MemoCache:
    """In-memory feature-key -> evaluation-vector map. Only grows."""

    def __init__(self) -> None:
        self._memo: Dict[str, str] = {}
        self.hits = 0
        self.misses = 0

    def __contains__(self, key: str) -> bool:
        return key in self._memo

    def __len__(self) -> int:
        return len(self._memo)

    def get(self, key: str) -> Optional[List[float]]:
        text = self._memo.get(key)
        if text is None:
            return None
        return decode_values(text)

    def put(self, key: str, evaluations: Sequence[float]) -> None:
        self._memo[key] = encode_values(evaluations)

    def items(self) -> Iterator[Tuple[str, List[float]]]:
        for key, text in self._memo.items():
            yield key, decode_values(text)

    def records(self) -> Iterator[str]:
        """Entries in persisted line form, in insertion order."""
        for key, text in self._memo.items():
            yield format_record(key, text)

    def merge_records(self, lines: Iterable[str]) -> int:
        """Add persisted lines; blank lines are skipped, later keys win."""
        count = 0
        for line in lines:
            if not line.strip():
                continue
            key, text = parse_record(line)
            self._memo[key] = text
            count += 1
        return count

    def sorted_items(self) -> List[Tuple[str, List[float]]]:
        """All entries, best evaluation first."""
        return sorted(
            self.items(),
            key=cmp_to_key(lambda a, b: compare_evaluations(b[1], a[1])),
        )

    def resolve(self, individual: Individual) -> Individual:
        """Fill in features and evaluations, evaluating only on a miss."""
        individual.features = canonical_features(individual.convert(individual.genes))
        key = encode_key(individual.features)
        cached = self.get(key)
        if cached is not None:
            self.hits += 1
            individual.evaluations = cached
            return individual

        self.misses += 1
        evaluations = evaluate_features(individual)
        self.put(key, evaluations)
        individual.evaluations = evaluations
        return individual

    def stats(self) -> CacheStats:
        return CacheStats(entries=len(self), hits=self.hits, misses=self.misses)


def evaluate_features(individual: Individual) -> List[float]:
    """Run ``evaluate`` on the individual's features and check the result."""
    evaluations = [float(v) for v in individual.evaluate(individual.features)]
    if not evaluations:
        raise ContractViolationError(
            "evaluate() returned an empty evaluation vector",
            context={"individual": type(individual).__name__},
        )
    return evaluations


def resolve_uncached(individual: Individual) -> Individual:
    """Evaluate without memoization."""
    individual.features = canonical_features(individual.convert(individual.genes))
    individual.evaluations = evaluate_features(individual)
    return individual
