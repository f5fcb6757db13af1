"""
Tests for the unified exception hierarchy.

This module tests core/exceptions.py which provides the standard
exception hierarchy for the evolution engine.
"""

import pytest
from datetime import datetime

from core.exceptions import (
    # Base exception
    EvolutionError,
    # Contract violations
    ContractViolationError,
    GeneLengthMismatchError,
    EvaluationLengthMismatchError,
    ReservedDelimiterError,
    UnsupportedFieldError,
    CacheFormatError,
    CacheParseError,
    # Parameter violations
    ParameterViolationError,
    UnknownStrategyError,
    InsufficientPopulationError,
    # IO
    CacheIOError,
    # Configuration
    ConfigurationError,
    SettingsValidationError,
    # Helper functions
    is_fatal,
    get_error_code,
)


class TestEvolutionError:
    """Tests for the base exception class."""

    def test_basic_creation(self):
        """Test basic exception creation."""
        error = EvolutionError("Test error")
        assert str(error) == "[EVOLUTION_ERROR] Test error"
        assert error.message == "Test error"
        assert error.error_code == "EVOLUTION_ERROR"
        assert error.is_recoverable is True
        assert error.context == {}
        assert error.cause is None
        assert isinstance(error.timestamp, datetime)

    def test_with_context(self):
        """Test exception with context dictionary."""
        error = EvolutionError("Test error", context={"needed": 3, "population_size": 2})
        assert "needed=3" in str(error)
        assert "population_size=2" in str(error)

    def test_with_cause(self):
        """Cause is kept and serialized as text."""
        cause = ValueError("could not convert string to float: 'x'")
        error = CacheParseError("bad value", cause=cause)
        assert error.cause is cause
        assert "could not convert" in error.to_dict()["cause"]

    def test_to_dict(self):
        """Test serialization to dictionary."""
        error = GeneLengthMismatchError("mismatch", context={"expected": 5, "got": 4})
        d = error.to_dict()
        assert d["error_code"] == "GENE_LENGTH_MISMATCH"
        assert d["message"] == "mismatch"
        assert d["is_recoverable"] is False
        assert d["context"] == {"expected": 5, "got": 4}
        assert "timestamp" in d


class TestHierarchy:
    """Every failure category is fatal and sits under the right base."""

    @pytest.mark.parametrize("exc_class", [
        GeneLengthMismatchError,
        EvaluationLengthMismatchError,
        ReservedDelimiterError,
        UnsupportedFieldError,
        CacheFormatError,
        CacheParseError,
    ])
    def test_contract_violations(self, exc_class):
        error = exc_class("x")
        assert isinstance(error, ContractViolationError)
        assert isinstance(error, EvolutionError)
        assert error.is_recoverable is False

    @pytest.mark.parametrize("exc_class", [UnknownStrategyError, InsufficientPopulationError])
    def test_parameter_violations(self, exc_class):
        error = exc_class("x")
        assert isinstance(error, ParameterViolationError)
        assert error.is_recoverable is False

    def test_cache_io_is_fatal(self):
        assert is_fatal(CacheIOError("unreadable"))

    def test_settings_validation(self):
        error = SettingsValidationError("bad")
        assert isinstance(error, ConfigurationError)
        assert error.error_code == "SETTINGS_INVALID"


class TestHelpers:
    """Tests for helper functions."""

    def test_is_fatal(self):
        assert is_fatal(ContractViolationError("x")) is True
        assert is_fatal(EvolutionError("x")) is False
        assert is_fatal(ValueError("x")) is False

    def test_get_error_code(self):
        assert get_error_code(UnknownStrategyError("x")) == "UNKNOWN_STRATEGY"
        assert get_error_code(CacheFormatError("x")) == "CACHE_FORMAT_INVALID"
        assert get_error_code(RuntimeError("x")) == "UNKNOWN"
