"""Backend base classes for cgecore.

This module defines the contract between a finalized RunSpec and a
numerical solver: the backend asks every block, in RunSpec order, to
build into a shared context, solves, then hands the solution back to
each block for reporting.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import numpy as np
from pydantic import BaseModel, Field

from cgecore.blocks.context import BuildContext
from cgecore.core.specs import RunSpec

logger = logging.getLogger(__name__)


class Solution(BaseModel):
    """Container for model solution results.

    Attributes:
        run_name: Name of the solved RunSpec
        status: Solver status (e.g., 'optimal', 'infeasible')
        variables: Dictionary of variable names to their solved values
        iterations: Number of solver iterations
    """

    run_name: str = Field(..., description="RunSpec name")
    status: str = Field(default="unknown", description="Solver status")
    variables: dict[str, np.ndarray] = Field(
        default_factory=dict, description="Variable values"
    )
    iterations: int = Field(default=0, description="Number of iterations")

    model_config = {"arbitrary_types_allowed": True}

    def get_variable(self, name: str) -> np.ndarray | None:
        """Get the value of a variable by name, or None if not found."""
        return self.variables.get(name)

    def to_dict(self) -> dict[str, Any]:
        """Convert solution to dictionary (with numpy arrays as lists)."""
        return {
            "run_name": self.run_name,
            "status": self.status,
            "variables": {k: np.asarray(v).tolist() for k, v in self.variables.items()},
            "iterations": self.iterations,
        }

    def __repr__(self) -> str:
        return (
            f"Solution({self.run_name}): "
            f"status={self.status}, "
            f"vars={len(self.variables)}"
        )


class Backend(ABC):
    """Abstract base class for solver backends.

    ``build`` and ``report`` drive the block lifecycle in RunSpec order;
    subclasses lower ``self.context`` into their own model in ``solve``.
    """

    def __init__(self, solver: str | None = None) -> None:
        """Initialize backend.

        Args:
            solver: Solver name (backend-specific)
        """
        self.solver = solver
        self.spec: RunSpec | None = None
        self.context: BuildContext | None = None

    def build(self, spec: RunSpec) -> BuildContext:
        """Build every block of the RunSpec into a fresh context.

        Returns:
            The populated build context
        """
        context = BuildContext()
        for block in spec.blocks:
            block.build(context, spec)
        self.spec = spec
        self.context = context
        logger.info(f"Built RunSpec '{spec.name}': {context!r}")
        return context

    @abstractmethod
    def solve(self, options: dict[str, Any] | None = None) -> Solution:
        """Solve the built model.

        Args:
            options: Solver-specific options

        Returns:
            Solution object with results
        """
        ...

    def report(self, solution: Solution) -> list[Any]:
        """Collect block reports in RunSpec order.

        Raises:
            RuntimeError: If ``build`` has not been called
        """
        if self.spec is None:
            msg = "Backend has no RunSpec; call build() first"
            raise RuntimeError(msg)
        return [block.report(solution) for block in self.spec.blocks]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(solver={self.solver})"
