"""
Unified Exception Hierarchy for the differential-evolution engine.

All exceptions inherit from EvolutionError, enabling consistent error handling.
Nothing in the engine retries: every error below aborts the current
generation and propagates out of ``Population.advance_epoch``.

Usage:
    from core.exceptions import EvolutionError, ContractViolationError

    try:
        population.advance_epoch(100, "rand", 1, 0.5, 0.5)
    except ContractViolationError as e:
        # Programming or data error (gene length, corrupted cache line)
        abort_run(e.error_code, e.context)
    except CacheIOError as e:
        # Cache file could not be read or written
        abort_run(e.error_code, e.context)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class EvolutionError(Exception):
    """
    Base exception for all engine errors.

    Attributes:
        error_code: Unique identifier for this error type
        is_recoverable: Whether a caller may continue after catching it
        context: Additional context about the error
        timestamp: When the error occurred
    """
    error_code: str = "EVOLUTION_ERROR"
    is_recoverable: bool = True

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(message)

    def __str__(self) -> str:
        base = f"[{self.error_code}] {self.message}"
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "is_recoverable": self.is_recoverable,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# CONTRACT VIOLATIONS (Non-recoverable - the run MUST stop)
# =============================================================================

class ContractViolationError(EvolutionError):
    """
    Base class for violations of the Individual contract or the cache format.

    These indicate a programming or configuration error, not a runtime
    condition, and are never recovered from.
    """
    error_code = "CONTRACT_VIOLATION"
    is_recoverable = False


class GeneLengthMismatchError(ContractViolationError):
    """
    Raised when individuals in one population carry different gene lengths.
    """
    error_code = "GENE_LENGTH_MISMATCH"


class EvaluationLengthMismatchError(ContractViolationError):
    """
    Raised when two evaluation vectors of different lengths are compared.
    """
    error_code = "EVALUATION_LENGTH_MISMATCH"


class ReservedDelimiterError(ContractViolationError):
    """
    Raised when a feature or evaluation value renders to text containing
    one of the cache record delimiters (``:``, ``,`` or a line break).
    """
    error_code = "RESERVED_DELIMITER"


class UnsupportedFieldError(ContractViolationError):
    """
    Raised when a feature value is not a number, bool or string and so has
    no canonical text form for the cache key.
    """
    error_code = "UNSUPPORTED_FIELD"


class CacheFormatError(ContractViolationError):
    """
    Raised when a persisted cache line is not of the form ``key:v1,v2,...``.
    """
    error_code = "CACHE_FORMAT_INVALID"


class CacheParseError(ContractViolationError):
    """
    Raised when a stored evaluation vector cannot be parsed back into floats.

    The store is trusted, so a value that does not parse means the entry is
    corrupted and cannot be used for that key.
    """
    error_code = "CACHE_PARSE_FAIL"


# =============================================================================
# PARAMETER VIOLATIONS
# =============================================================================

class ParameterViolationError(EvolutionError):
    """
    Base class for invalid operator parameters.
    """
    error_code = "PARAMETER_VIOLATION"
    is_recoverable = False


class UnknownStrategyError(ParameterViolationError):
    """
    Raised when the mutation strategy is neither ``rand`` nor ``best``.
    """
    error_code = "UNKNOWN_STRATEGY"


class InsufficientPopulationError(ParameterViolationError):
    """
    Raised when a mutation needs at least as many distinct individuals as
    the population holds.
    """
    error_code = "INSUFFICIENT_POPULATION"


# =============================================================================
# CACHE IO ERRORS
# =============================================================================

class CacheIOError(EvolutionError):
    """
    Raised when the persistent cache file cannot be read or written.

    There is no implicit fallback to an empty cache for unreadable files.
    """
    error_code = "CACHE_IO_FAILURE"
    is_recoverable = False


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(EvolutionError):
    """
    Base class for configuration-related errors.
    """
    error_code = "CONFIG_ERROR"


class SettingsValidationError(ConfigurationError):
    """
    Raised when settings fail schema validation.

    Uses Pydantic validation under the hood.
    """
    error_code = "SETTINGS_INVALID"
    is_recoverable = False


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def is_fatal(error: Exception) -> bool:
    """
    Check if an error must abort the run.

    Args:
        error: The exception to check

    Returns:
        True if the error is non-recoverable
    """
    if isinstance(error, EvolutionError):
        return not error.is_recoverable
    return False


def get_error_code(error: Exception) -> str:
    """
    Get the error code for an exception.

    Args:
        error: The exception to get the code for

    Returns:
        Error code string, or "UNKNOWN" for foreign exceptions
    """
    if isinstance(error, EvolutionError):
        return error.error_code
    return "UNKNOWN"
