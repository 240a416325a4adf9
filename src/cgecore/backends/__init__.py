"""Backends module for cgecore.

Defines the solver-facing contract; concrete solvers live elsewhere.
"""

from cgecore.backends.base import Backend, Solution

__all__ = [
    "Backend",
    "Solution",
]
