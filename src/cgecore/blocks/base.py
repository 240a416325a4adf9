"""Block contract for cgecore models.

Blocks are the pluggable components of a model (production, trade,
households, ...). Every block supports three operations:

- ``calibrate(data, benchmark, params)``: derive parameters from benchmark data
- ``build(context, spec)``: emit variables and equations into a build context
- ``report(solution)``: derive block-specific output from a solved model

The assembly pipeline treats blocks as opaque values; it only needs them
to satisfy ``BlockProtocol``. ``Block`` is a convenient pydantic base
class whose operations fail loudly until a subclass implements them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from cgecore.blocks.context import BuildContext
    from cgecore.core.specs import RunSpec


@runtime_checkable
class BlockProtocol(Protocol):
    """Capability set every block must provide."""

    def calibrate(self, data: Any, benchmark: Any, params: Any) -> None: ...

    def build(self, context: Any, spec: RunSpec) -> None: ...

    def report(self, solution: Any) -> Any: ...


class Block(BaseModel):
    """Base class for model blocks.

    Subclasses override the operations they support. Calling an operation
    the subclass does not implement raises ``NotImplementedError``.

    Attributes:
        name: Block identifier (defaults to the class name)
        description: Human-readable description

    Example:
        >>> class NumeraireBlock(Block):
        ...     def build(self, context, spec):
        ...         context.add_equation(
        ...             "numeraire",
        ...             equals(var("P", spec.closure.numeraire), 1.0),
        ...         )
    """

    name: str = Field(default="", description="Block identifier")
    description: str = Field(default="", description="Block description")

    model_config = {"frozen": False, "arbitrary_types_allowed": True}

    def model_post_init(self, __context: Any) -> None:
        """Default the block name to the class name."""
        if not self.name:
            self.name = type(self).__name__

    def _missing(self, operation: str) -> NotImplementedError:
        return NotImplementedError(f"Block '{self.name}' does not implement {operation}")

    def calibrate(self, data: Any, benchmark: Any, params: Any) -> None:
        """Derive calibrated parameters from benchmark data.

        Args:
            data: Model data (externally defined)
            benchmark: Benchmark data, e.g. a SAM
            params: Parameter container to read from or update
        """
        raise self._missing("calibrate")

    def build(self, context: BuildContext, spec: RunSpec) -> None:
        """Emit the block's variables and equations.

        Args:
            context: Shared build context
            spec: The finalized RunSpec
        """
        raise self._missing("build")

    def report(self, solution: Any) -> Any:
        """Compute block-specific output from a solution."""
        raise self._missing("report")

    def get_info(self) -> dict[str, Any]:
        """Get block metadata as dictionary."""
        return {
            "name": self.name,
            "type": type(self).__name__,
            "description": self.description,
        }

    def __repr__(self) -> str:
        return f"Block {self.name}"


def calibrate(block: BlockProtocol, data: Any, benchmark: Any, params: Any) -> None:
    """Calibration hook for blocks."""
    block.calibrate(data, benchmark, params)


def build(block: BlockProtocol, context: Any, spec: RunSpec) -> None:
    """Build hook for blocks."""
    block.build(context, spec)


def report(block: BlockProtocol, solution: Any) -> Any:
    """Reporting hook for blocks."""
    return block.report(solution)


class BlockRegistry:
    """Registry for block classes.

    Maintains a registry of available block types so that run
    configurations can refer to blocks by name.

    Example:
        >>> registry = BlockRegistry()
        >>> registry.register(NumeraireBlock)
        >>> block = registry.create("NumeraireBlock")
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._blocks: dict[str, type] = {}

    def register(self, block_class: type) -> None:
        """Register a block class under its class name.

        Raises:
            ValueError: If a block with the same name is already registered
            TypeError: If the class does not implement the block operations
        """
        name = block_class.__name__
        if name in self._blocks:
            msg = f"Block '{name}' is already registered"
            raise ValueError(msg)
        missing = [
            op
            for op in ("calibrate", "build", "report")
            if not callable(getattr(block_class, op, None))
        ]
        if missing:
            msg = f"Block '{name}' is missing operations: {missing}"
            raise TypeError(msg)
        self._blocks[name] = block_class

    def get(self, name: str) -> type:
        """Get a block class by name.

        Raises:
            KeyError: If block not found
        """
        if name not in self._blocks:
            msg = f"Block '{name}' not found in registry"
            raise KeyError(msg)
        return self._blocks[name]

    def list_blocks(self) -> list[str]:
        """Return list of registered block names."""
        return list(self._blocks.keys())

    def create(self, name: str, **kwargs: Any) -> Any:
        """Create a block instance from a registered class."""
        block_class = self.get(name)
        return block_class(**kwargs)

    def __contains__(self, name: str) -> bool:
        """Check if block is registered."""
        return name in self._blocks


# Global registry instance
_global_registry: BlockRegistry | None = None


def get_registry() -> BlockRegistry:
    """Get the global block registry."""
    global _global_registry
    if _global_registry is None:
        _global_registry = BlockRegistry()
    return _global_registry


def register_block(block_class: type) -> type:
    """Decorator to register a block class in the global registry.

    Example:
        >>> @register_block
        ... class NumeraireBlock(Block):
        ...     pass
    """
    get_registry().register(block_class)
    return block_class
