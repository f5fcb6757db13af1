"""
Pytest configuration and shared fixtures for the evolution engine tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.fixtures.problems import CountingSphere, Sphere  # noqa: E402


@pytest.fixture
def sphere_population():
    """Unevaluated 20 x 5 sphere population, seed 42."""
    from evolution.population import Population
    return Population.from_shape(Sphere, size=20, gene_len=5, seed=42)


@pytest.fixture
def counting_sphere():
    """CountingSphere with its call log cleared before and after the test."""
    CountingSphere.reset()
    yield CountingSphere
    CountingSphere.reset()


@pytest.fixture
def cache_path(tmp_path):
    """Location for a persistent cache file that does not exist yet."""
    return tmp_path / "state" / "evaluations.memo"


@pytest.fixture(autouse=True)
def isolated_event_log(tmp_path, monkeypatch):
    """Keep JSON-lines events out of the working directory."""
    from core.structured_log import close_event_log
    monkeypatch.setenv("DIFFEVO_LOG_DIR", str(tmp_path / "logs"))
    yield
    close_event_log()
