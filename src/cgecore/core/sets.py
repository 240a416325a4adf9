"""Canonical set and mapping containers for CGE run specifications.

Every model in the family works over the same four domains: commodities,
activities, factors and institutions. ``Sets`` holds them as ordered,
immutable sequences; ``Mappings`` holds the structural relations between
them.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, Field

CORE_SETS: tuple[str, ...] = ("commodities", "activities", "factors", "institutions")


class Sets(BaseModel):
    """The four canonical economic domains.

    Element order is preserved and significant. Elements are expected to
    be unique within each domain, but this is not enforced here.

    Attributes:
        commodities: Commodity symbols
        activities: Activity (sector) symbols
        factors: Factor symbols
        institutions: Institution symbols

    Example:
        >>> sets = Sets(
        ...     commodities=["agr", "mfg"],
        ...     activities=["agr", "mfg"],
        ...     factors=["lab", "cap"],
        ...     institutions=["hh", "gov"],
        ... )
        >>> sets.domain("factors")
        ('lab', 'cap')
    """

    commodities: tuple[str, ...] = Field(default_factory=tuple, description="Commodities")
    activities: tuple[str, ...] = Field(default_factory=tuple, description="Activities")
    factors: tuple[str, ...] = Field(default_factory=tuple, description="Factors")
    institutions: tuple[str, ...] = Field(default_factory=tuple, description="Institutions")

    model_config = {"frozen": True}

    def domain(self, name: str) -> tuple[str, ...]:
        """Get a core set by name.

        Args:
            name: One of ``commodities``, ``activities``, ``factors``,
                ``institutions``

        Returns:
            The ordered elements of the set

        Raises:
            KeyError: If the name is not a core set
        """
        if name not in CORE_SETS:
            msg = f"Unknown set '{name}'. Expected one of {list(CORE_SETS)}"
            raise KeyError(msg)
        return getattr(self, name)

    def items(self) -> Iterator[tuple[str, tuple[str, ...]]]:
        """Iterate over (name, elements) pairs in canonical order."""
        for name in CORE_SETS:
            yield name, getattr(self, name)

    def summary(self) -> dict[str, int]:
        """Return the size of each core set."""
        return {name: len(elements) for name, elements in self.items()}

    def __repr__(self) -> str:
        sizes = ", ".join(f"{name}={size}" for name, size in self.summary().items())
        return f"Sets({sizes})"


class Mappings(BaseModel):
    """Structural relations between sets.

    Attributes:
        activity_to_output: Output commodity of each activity
    """

    activity_to_output: dict[str, str] = Field(
        default_factory=dict, description="Activity to output commodity"
    )

    model_config = {"frozen": True}

    def output_of(self, activity: str) -> str:
        """Get the output commodity of an activity.

        Raises:
            KeyError: If the activity has no mapping entry
        """
        if activity not in self.activity_to_output:
            msg = f"Activity '{activity}' has no output commodity mapping"
            raise KeyError(msg)
        return self.activity_to_output[activity]
