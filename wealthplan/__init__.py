"""Savings planner backend: projection math and the cofrinho savings calendar."""

__version__ = "0.1.0"
