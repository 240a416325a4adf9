"""RunSpec assembly.

``build_spec`` turns named sections of blocks plus a structural template
into one validated RunSpec, or fails fast naming the offending section
or set. Blocks are carried as opaque values; their order in the result
is the section order followed by the order within each section.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from cgecore.core.sets import Mappings, Sets
from cgecore.core.specs import (
    ClosureSpec,
    ModelSpec,
    RunSpec,
    RunSpecTemplate,
    ScenarioSpec,
    SectionSpec,
    as_symbol,
)
from cgecore.errors import (
    DuplicateSectionError,
    EmptySectionError,
    MissingSectionError,
    UnknownSectionError,
)
from cgecore.qa.checks import validate

logger = logging.getLogger(__name__)


def _symbols(values: Sequence[Any]) -> list[str]:
    return [as_symbol(v) for v in values]


def check_sections(
    sections: Sequence[SectionSpec],
    *,
    required_sections: Sequence[str] = (),
    allowed_sections: Sequence[str] = (),
    required_nonempty: Sequence[str] = (),
) -> None:
    """Check section composition against a template's constraints.

    Args:
        sections: Sections in assembly order
        required_sections: Sections that must be present
        allowed_sections: If non-empty, the only section names accepted.
            An empty list places no restriction.
        required_nonempty: Sections that must be present and hold blocks

    Raises:
        DuplicateSectionError: A section name occurs more than once
        UnknownSectionError: A section name is outside ``allowed_sections``
        MissingSectionError: A required section is absent
        EmptySectionError: A required-nonempty section has no blocks
    """
    allowed = set(_symbols(allowed_sections))
    seen: set[str] = set()
    for sec in sections:
        if sec.name in seen:
            raise DuplicateSectionError(sec.name)
        if allowed and sec.name not in allowed:
            raise UnknownSectionError(sec.name)
        seen.add(sec.name)

    for req in _symbols(required_sections):
        if req not in seen:
            raise MissingSectionError(req)

    for req in _symbols(required_nonempty):
        if req not in seen:
            raise MissingSectionError(req)
        matches = [sec for sec in sections if sec.name == req]
        if len(matches) != 1:
            raise DuplicateSectionError(req)
        if len(matches[0].blocks) == 0:
            raise EmptySectionError(req)


def flatten_sections(sections: Sequence[SectionSpec]) -> tuple[Any, ...]:
    """Concatenate section blocks in section order."""
    blocks: list[Any] = []
    for sec in sections:
        blocks.extend(sec.blocks)
    return tuple(blocks)


def build_spec(
    name: str | RunSpecTemplate,
    sets: Sets,
    mappings: Mappings,
    sections: Sequence[SectionSpec],
    *,
    closure: ClosureSpec,
    scenario: ScenarioSpec,
    required_sections: Sequence[str] | None = None,
    allowed_sections: Sequence[str] = (),
    required_nonempty: Sequence[str] = (),
) -> RunSpec:
    """Assemble a RunSpec from sections.

    Validates duplicate, allowed, required and required-nonempty sections,
    flattens the sections into a single ``ModelSpec.blocks`` tuple and runs
    the strict ``validate`` on the result.

    Args:
        name: Run name, or a ``RunSpecTemplate`` supplying the name and
            the default ``required_sections``
        sets: Core sets
        mappings: Set mappings
        sections: Sections in assembly order
        closure: Closure choices
        scenario: Scenario deltas
        required_sections: Sections that must be present (defaults to the
            template's list, or none)
        allowed_sections: If non-empty, only these section names are allowed
        required_nonempty: Sections that must exist and contain a block

    Returns:
        The validated RunSpec

    Raises:
        SectionError: On a section composition violation
        EmptySetError: If a core set is empty

    Example:
        >>> tpl = template("Demo", required_sections=["production", "trade"])
        >>> spec = build_spec(
        ...     tpl, sets, mappings,
        ...     [section("production", [block]), section("trade", [])],
        ...     closure=ClosureSpec(numeraire="a"),
        ...     scenario=ScenarioSpec(name="baseline"),
        ... )
    """
    if isinstance(name, RunSpecTemplate):
        run_name = name.name
        if required_sections is None:
            required_sections = name.required_sections
    else:
        run_name = name
    if required_sections is None:
        required_sections = ()

    logger.debug(
        f"Assembling RunSpec '{run_name}' from sections {[sec.name for sec in sections]}"
    )
    check_sections(
        sections,
        required_sections=required_sections,
        allowed_sections=allowed_sections,
        required_nonempty=required_nonempty,
    )

    model = ModelSpec(blocks=flatten_sections(sections), sets=sets, mappings=mappings)
    spec = RunSpec(name=run_name, model=model, closure=closure, scenario=scenario)
    validate(spec)
    logger.info(f"Assembled RunSpec '{run_name}' with {len(model.blocks)} blocks")
    return spec
