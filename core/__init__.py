"""
Core Infrastructure
====================

Foundational components for the differential-evolution engine.

Components:
- exceptions: Unified error hierarchy
- structured_log: JSON event logging
- journal: Append-only line journal with atomic rewrite
"""

from .exceptions import (
    EvolutionError,
    ContractViolationError,
    ParameterViolationError,
    CacheIOError,
    is_fatal,
    get_error_code,
)
from .structured_log import jlog, read_recent_logs
from .journal import append_journal, read_journal, rewrite_journal

__all__ = [
    # Exceptions
    'EvolutionError',
    'ContractViolationError',
    'ParameterViolationError',
    'CacheIOError',
    'is_fatal',
    'get_error_code',
    # Structured Logging
    'jlog',
    'read_recent_logs',
    # Journal
    'append_journal',
    'read_journal',
    'rewrite_journal',
]
