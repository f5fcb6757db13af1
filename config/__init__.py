"""Configuration loading for the evolution engine."""
