"""
Shared test fixtures for the evolution engine.

- problems: Individual implementations (sphere, counting sphere, knapsack)
"""

from .problems import CountingSphere, Knapsack, Sphere

__all__ = [
    "Sphere",
    "CountingSphere",
    "Knapsack",
]
