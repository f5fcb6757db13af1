"""
File-backed evaluation cache.

The file is a journal of ``key:v1,v2,...`` lines. It is read in full at the
start of an epoch-advance call, every new key is appended (and synced)
before the engine moves on, and the whole map is rewritten at the end of
the call. A crash can only lose the evaluation in flight; every flushed
record is kept.

Concurrent processes sharing one cache file are not supported.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence, Union

from core.exceptions import CacheIOError
from core.journal import append_journal, read_journal, rewrite_journal
from evolution.memo import MemoCache, encode_values, format_record

logger = logging.getLogger(__name__)


class PersistentCache(MemoCache):
    """MemoCache whose entries survive across process runs."""

    def __init__(self, path: Union[str, Path], allow_missing: bool = True):
        super().__init__()
        self.path = Path(path)
        self.allow_missing = allow_missing

    def load(self) -> int:
        """Read the whole file into memory. Returns the number of records."""
        if not self.path.exists():
            if not self.allow_missing:
                raise CacheIOError(
                    "Cache file does not exist",
                    context={"path": str(self.path)},
                )
            logger.warning(f"Cache file {self.path} not found, starting with an empty cache")
            return 0
        count = self.merge_records(read_journal(self.path))
        logger.info(f"Loaded {count} cache records from {self.path} ({len(self)} keys)")
        return count

    def put(self, key: str, evaluations: Sequence[float]) -> None:
        """Store in memory and append to the file before returning."""
        text = encode_values(evaluations)
        if self._memo.get(key) == text:
            return
        self._memo[key] = text
        append_journal(self.path, format_record(key, text))

    def flush(self) -> None:
        """Rewrite the file with exactly one line per key."""
        rewrite_journal(self.path, self.records())
        logger.debug(f"Rewrote cache {self.path} with {len(self)} keys")

    @contextmanager
    def session(self) -> Iterator["PersistentCache"]:
        """Load on entry, compact on clean exit."""
        self.load()
        yield self
        self.flush()


def save_memo(cache: MemoCache, path: Union[str, Path]) -> None:
    """Write any cache's entries to ``path`` in the persisted line format."""
    rewrite_journal(Path(path), cache.records())


def load_memo(path: Union[str, Path]) -> MemoCache:
    """Read a persisted file into a plain in-memory cache."""
    cache = MemoCache()
    cache.merge_records(read_journal(Path(path)))
    return cache
