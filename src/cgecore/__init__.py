"""cgecore - shared data model and interface contract for CGE model families."""

from cgecore.assembly import build_spec
from cgecore.blocks import Block, BlockProtocol, BuildContext, register_block
from cgecore.core import (
    ClosureSpec,
    Mappings,
    ModelSpec,
    RunSpec,
    RunSpecTemplate,
    ScenarioSpec,
    SectionName,
    SectionSpec,
    Sets,
    allowed_sections,
    getparam,
    section,
    template,
)
from cgecore.qa import ValidationReport, validate, validate_spec
from cgecore.version import __version__

__all__ = [
    "__version__",
    "Sets",
    "Mappings",
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
    "build_spec",
    "getparam",
    "Block",
    "BlockProtocol",
    "BuildContext",
    "register_block",
    "validate",
    "validate_spec",
    "ValidationReport",
]
