"""
Append-only line journal helpers.

Used by the persistent evaluation cache: every new record is appended and
synced before the caller continues, and a compacted copy can replace the
journal in one atomic rename.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, List

from core.exceptions import CacheIOError


def _ensure_dir(p: Path) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)


def read_journal(path: Path) -> List[str]:
    """Read every line of the journal, without trailing newlines."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().splitlines()
    except OSError as e:
        raise CacheIOError(
            "Cannot read journal",
            context={"path": str(path)},
            cause=e,
        ) from e


def append_journal(path: Path, line: str) -> None:
    """Append one line and force it to disk before returning."""
    try:
        _ensure_dir(path)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        raise CacheIOError(
            "Cannot append to journal",
            context={"path": str(path)},
            cause=e,
        ) from e


def rewrite_journal(path: Path, lines: Iterable[str]) -> None:
    """
    Replace the journal with ``lines``.

    Writes to a temp file in the same directory, then renames it over the
    target so a crash leaves either the old or the new journal intact.
    """
    try:
        _ensure_dir(path)
        fd, temp_path = tempfile.mkstemp(suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise CacheIOError(
            "Cannot create temp file for journal rewrite",
            context={"path": str(path)},
            cause=e,
        ) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except OSError as e:
        # Clean up temp file on error
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise CacheIOError(
            "Cannot rewrite journal",
            context={"path": str(path)},
            cause=e,
        ) from e
