"""Core data structures for cgecore run specifications.

This module provides the data model shared by all models of the family:
- Sets and Mappings: canonical domains and their relations
- Specs: closure, scenario, sections, templates and the RunSpec
- Expressions: backend-agnostic equation syntax trees
- Parameters: the canonical parameter accessor
"""

from cgecore.core.expressions import (
    EAdd,
    EConst,
    EDiv,
    EEq,
    EIndex,
    EMul,
    ENeg,
    EParam,
    EPow,
    EProd,
    EquationExpr,
    ERaw,
    ESum,
    EVar,
)
from cgecore.core.parameters import getparam
from cgecore.core.sets import CORE_SETS, Mappings, Sets
from cgecore.core.specs import (
    ClosureSpec,
    ModelSpec,
    RunSpec,
    RunSpecTemplate,
    ScenarioSpec,
    SectionName,
    SectionSpec,
    allowed_sections,
    section,
    template,
)

__all__ = [
    # Sets
    "CORE_SETS",
    "Sets",
    "Mappings",
    # Specs
    "ClosureSpec",
    "ScenarioSpec",
    "SectionSpec",
    "SectionName",
    "RunSpecTemplate",
    "ModelSpec",
    "RunSpec",
    "allowed_sections",
    "section",
    "template",
    # Parameters
    "getparam",
    # Expressions
    "EquationExpr",
    "EIndex",
    "EVar",
    "EParam",
    "EConst",
    "ERaw",
    "ENeg",
    "EAdd",
    "EMul",
    "EDiv",
    "EPow",
    "ESum",
    "EProd",
    "EEq",
]
