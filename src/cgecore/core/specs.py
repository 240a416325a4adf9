"""Run specification types.

A ``RunSpec`` describes one fully assembled model run: the ordered block
list together with sets and mappings (``ModelSpec``), the closure choice
and the scenario. ``SectionSpec`` and ``RunSpecTemplate`` are the inputs
of the assembly step in :mod:`cgecore.assembly`.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from cgecore.core.sets import Mappings, Sets


class SectionName(str, Enum):
    """Canonical section names that model-family templates draw from."""

    PRODUCTION = "production"
    FACTORS = "factors"
    GOVERNMENT = "government"
    SAVINGS = "savings"
    HOUSEHOLDS = "households"
    PRICES = "prices"
    EXTERNAL = "external"
    TRADE = "trade"
    MARKETS = "markets"
    OBJECTIVE = "objective"
    INIT = "init"
    CLOSURE = "closure"


def allowed_sections() -> list[str]:
    """Return the canonical section names for RunSpec assembly."""
    return [name.value for name in SectionName]


def as_symbol(value: Any) -> Any:
    """Unwrap enum members (e.g. ``SectionName``) into their plain value."""
    if isinstance(value, Enum):
        return value.value
    return value


class ClosureSpec(BaseModel):
    """Closure choices for a run.

    Attributes:
        numeraire: Commodity or factor whose price is fixed
    """

    numeraire: str = Field(..., description="Price numeraire")

    model_config = {"frozen": True}


class ScenarioSpec(BaseModel):
    """Scenario changes relative to a baseline.

    Attributes:
        name: Scenario identifier
        shocks: Shock name to shock value (any type)
    """

    name: str = Field(..., description="Scenario identifier")
    shocks: dict[str, Any] = Field(default_factory=dict, description="Named shocks")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class SectionSpec(BaseModel):
    """Named, ordered group of blocks.

    Attributes:
        name: Section name, unique within one assembly call
        blocks: Blocks in the order they contribute equations
    """

    name: str = Field(..., min_length=1, description="Section name")
    blocks: tuple[Any, ...] = Field(default_factory=tuple, description="Section blocks")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("name", mode="before")
    @classmethod
    def unwrap_name(cls, v: Any) -> Any:  # noqa: N805
        """Accept ``SectionName`` members."""
        return as_symbol(v)

    @field_validator("blocks")
    @classmethod
    def check_blocks(cls, v: tuple[Any, ...]) -> tuple[Any, ...]:  # noqa: N805
        """Ensure every entry implements the block operations."""
        from cgecore.blocks.base import BlockProtocol

        for block in v:
            if not isinstance(block, BlockProtocol):
                msg = (
                    f"{type(block).__name__} is not a block: "
                    "calibrate, build and report are required"
                )
                raise ValueError(msg)
        return v

    def __len__(self) -> int:
        return len(self.blocks)


class RunSpecTemplate(BaseModel):
    """Structural contract of a model family.

    Attributes:
        name: Template name, used as the RunSpec name
        required_sections: Sections every run of the family must supply
    """

    name: str = Field(..., description="Template name")
    required_sections: tuple[str, ...] = Field(
        default_factory=tuple, description="Required section names"
    )

    model_config = {"frozen": True}

    @field_validator("required_sections", mode="before")
    @classmethod
    def unwrap_sections(cls, v: Any) -> Any:  # noqa: N805
        """Accept ``SectionName`` members."""
        if isinstance(v, (list, tuple)):
            return tuple(as_symbol(item) for item in v)
        return v


class ModelSpec(BaseModel):
    """Model structure: flattened blocks plus sets and mappings."""

    blocks: tuple[Any, ...] = Field(default_factory=tuple, description="Ordered blocks")
    sets: Sets = Field(..., description="Core sets")
    mappings: Mappings = Field(default_factory=Mappings, description="Set mappings")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class RunSpec(BaseModel):
    """Full specification of one model run.

    Instances returned by :func:`cgecore.assembly.build_spec` have passed
    strict validation. Direct construction performs no structural checks.

    Attributes:
        name: Run name
        model: Blocks, sets and mappings
        closure: Closure choices
        scenario: Scenario deltas
    """

    name: str = Field(..., description="Run name")
    model: ModelSpec = Field(..., description="Model structure")
    closure: ClosureSpec = Field(..., description="Closure choices")
    scenario: ScenarioSpec = Field(..., description="Scenario")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def blocks(self) -> tuple[Any, ...]:
        """Ordered block list of the model."""
        return self.model.blocks

    @property
    def sets(self) -> Sets:
        """Core sets of the model."""
        return self.model.sets

    @property
    def mappings(self) -> Mappings:
        """Set mappings of the model."""
        return self.model.mappings

    def __repr__(self) -> str:
        return (
            f"RunSpec '{self.name}': {len(self.blocks)} blocks, "
            f"numeraire={self.closure.numeraire}, scenario={self.scenario.name}"
        )


def section(name: str, blocks: Sequence[Any] = ()) -> SectionSpec:
    """Create a named section from blocks."""
    return SectionSpec(name=name, blocks=tuple(blocks))


def template(name: str, required_sections: Sequence[str] = ()) -> RunSpecTemplate:
    """Create a template describing required sections.

    This is a lightweight declaration for a model family; the template is
    used by ``build_spec`` to enforce required sections consistently.
    """
    return RunSpecTemplate(name=name, required_sections=tuple(required_sections))
