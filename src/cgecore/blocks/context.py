"""Build context shared by blocks while a RunSpec is being built.

Each block's ``build`` declares the variables and parameters it uses and
registers its equations here. A backend then lowers the collected
declarations and expression trees into its own model.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, Field

from cgecore.core.expressions import EEq
from cgecore.errors import DuplicateDeclarationError

logger = logging.getLogger(__name__)


class ParameterSpec(BaseModel):
    """Declaration of a parameter used by a block.

    Attributes:
        name: Parameter identifier
        domains: Tuple of core set names defining dimensions
        description: Human-readable description
    """

    name: str = Field(..., min_length=1, description="Parameter identifier")
    domains: tuple[str, ...] = Field(
        default_factory=tuple, description="Dimension set names"
    )
    description: str = Field(default="", description="Parameter description")

    model_config = {"frozen": True}


class VariableSpec(BaseModel):
    """Declaration of a variable solved for by the backend.

    Attributes:
        name: Variable identifier
        domains: Tuple of core set names defining dimensions
        lower: Lower bound (default: 0)
        upper: Upper bound (default: inf)
        description: Human-readable description
    """

    name: str = Field(..., min_length=1, description="Variable identifier")
    domains: tuple[str, ...] = Field(
        default_factory=tuple, description="Dimension set names"
    )
    lower: float = Field(default=0.0, description="Lower bound")
    upper: float = Field(default=float("inf"), description="Upper bound")
    description: str = Field(default="", description="Variable description")

    model_config = {"frozen": True}


class BuildContext:
    """Collects declarations and equations emitted by blocks.

    Re-declaring a variable or parameter with an identical spec is a
    no-op, so several blocks may declare a shared symbol. Conflicting
    declarations and repeated equation names raise
    ``DuplicateDeclarationError``. Equations keep registration order.
    """

    def __init__(self) -> None:
        self._variables: dict[str, VariableSpec] = {}
        self._parameters: dict[str, ParameterSpec] = {}
        self._equations: dict[str, EEq] = {}

    def _declare(self, table: dict[str, Any], spec: Any, kind: str) -> None:
        existing = table.get(spec.name)
        if existing is None:
            table[spec.name] = spec
            return
        if existing != spec:
            msg = f"Conflicting declarations for {kind} '{spec.name}'"
            raise DuplicateDeclarationError(msg)

    def add_variable(self, spec: VariableSpec) -> None:
        """Declare a variable."""
        self._declare(self._variables, spec, "variable")

    def add_parameter(self, spec: ParameterSpec) -> None:
        """Declare a parameter."""
        self._declare(self._parameters, spec, "parameter")

    def add_equation(self, name: str, equation: EEq) -> None:
        """Register a named equation.

        Raises:
            DuplicateDeclarationError: If the name is already registered
            TypeError: If ``equation`` is not an ``EEq``
        """
        if not isinstance(equation, EEq):
            msg = f"Equation '{name}' must be an EEq, got {type(equation).__name__}"
            raise TypeError(msg)
        if name in self._equations:
            msg = f"Equation '{name}' already exists"
            raise DuplicateDeclarationError(msg)
        self._equations[name] = equation
        logger.debug(f"Registered equation {name}: {equation}")

    @property
    def variables(self) -> dict[str, VariableSpec]:
        return dict(self._variables)

    @property
    def parameters(self) -> dict[str, ParameterSpec]:
        return dict(self._parameters)

    @property
    def equations(self) -> dict[str, EEq]:
        return dict(self._equations)

    def iter_equations(self) -> Iterator[tuple[str, EEq]]:
        """Iterate over (name, equation) pairs in registration order."""
        return iter(self._equations.items())

    def summary(self) -> dict[str, int]:
        """Return declaration counts."""
        return {
            "variables": len(self._variables),
            "parameters": len(self._parameters),
            "equations": len(self._equations),
        }

    def __repr__(self) -> str:
        counts = self.summary()
        return (
            f"BuildContext: {counts['variables']} vars, "
            f"{counts['parameters']} params, {counts['equations']} eqs"
        )
