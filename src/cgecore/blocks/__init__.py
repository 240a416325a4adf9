"""Blocks module for cgecore.

Blocks are pluggable model components. This module defines the
three-operation contract they satisfy and the build context they emit
equations into; concrete blocks live in model-definition packages.
"""

from cgecore.blocks.base import (
    Block,
    BlockProtocol,
    BlockRegistry,
    build,
    calibrate,
    get_registry,
    register_block,
    report,
)
from cgecore.blocks.context import BuildContext, ParameterSpec, VariableSpec

__all__ = [
    "Block",
    "BlockProtocol",
    "BlockRegistry",
    "get_registry",
    "register_block",
    "calibrate",
    "build",
    "report",
    "BuildContext",
    "ParameterSpec",
    "VariableSpec",
]
