"""Exception types raised by cgecore.

Assembly and strict validation fail fast with one of the ``RunSpecError``
subclasses below. Each carries the offending section or set name so that
callers can react without parsing the message.
"""

from __future__ import annotations


class RunSpecError(ValueError):
    """Base class for RunSpec assembly and validation failures."""


class SectionError(RunSpecError):
    """A section-level assembly failure.

    Attributes:
        section: Name of the offending section
    """

    prefix = "Section error"

    def __init__(self, section: str) -> None:
        self.section = section
        super().__init__(f"{self.prefix}: {section}")


class DuplicateSectionError(SectionError):
    """The same section name was supplied more than once."""

    prefix = "Duplicate section"


class UnknownSectionError(SectionError):
    """A section name is outside the allowed list."""

    prefix = "Unknown section"


class MissingSectionError(SectionError):
    """A required section was not supplied."""

    prefix = "Missing required section"


class EmptySectionError(SectionError):
    """A section that must hold blocks is empty."""

    prefix = "Section must be non-empty"


class EmptySetError(RunSpecError):
    """A core set of the RunSpec has no elements.

    Attributes:
        set_name: Name of the empty set (e.g. ``"commodities"``)
    """

    def __init__(self, set_name: str) -> None:
        self.set_name = set_name
        super().__init__(f"Sets.{set_name} is empty")


class DuplicateDeclarationError(ValueError):
    """A block declared a symbol that conflicts with an earlier declaration."""


class MissingParameterError(KeyError):
    """A named parameter is not present in a parameter container."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing parameter: {name}")

    def __str__(self) -> str:
        return str(self.args[0])


class ConfigError(ValueError):
    """A run configuration file is malformed."""
