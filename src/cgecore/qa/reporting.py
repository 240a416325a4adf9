"""Reporting models for RunSpec diagnostics."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Literal

MessageKind = Literal["errors", "warnings", "notes"]


class ReportCategory(str, Enum):
    """Diagnostic categories, in report order."""

    STRUCTURAL = "structural"
    CLOSURE = "closure"
    ACCOUNTING = "accounting"


@dataclass
class CategoryReport:
    """Messages collected for one diagnostic category."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return asdict(self)


@dataclass
class ValidationReport:
    """Categorized result of ``validate_spec``.

    ``ok`` is true iff no category holds an error. Warnings and notes
    never affect ``ok``.
    """

    ok: bool
    errors: int
    warnings: int
    categories: dict[str, CategoryReport]

    @classmethod
    def from_categories(cls, categories: dict[str, CategoryReport]) -> ValidationReport:
        """Finalize per-category messages into a report with totals."""
        errors = sum(len(cat.errors) for cat in categories.values())
        warnings = sum(len(cat.warnings) for cat in categories.values())
        return cls(ok=errors == 0, errors=errors, warnings=warnings, categories=categories)

    def category(self, name: str | ReportCategory) -> CategoryReport:
        """Get one category.

        Raises:
            KeyError: If the category is not part of the report
        """
        key = name.value if isinstance(name, ReportCategory) else name
        if key not in self.categories:
            msg = f"Category '{key}' not found in report"
            raise KeyError(msg)
        return self.categories[key]

    def messages(self, kind: MessageKind) -> list[str]:
        """All messages of one kind, prefixed with their category."""
        return [
            f"[{name}] {message}"
            for name, cat in self.categories.items()
            for message in getattr(cat, kind)
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "errors": self.errors,
            "warnings": self.warnings,
            "categories": {name: cat.to_dict() for name, cat in self.categories.items()},
        }

    def save_json(self, path: Path | str) -> None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(self.to_dict(), indent=2))


def format_report_summary(report: ValidationReport) -> str:
    """Compact human-readable summary line."""
    status = "PASS" if report.ok else "FAIL"
    notes = sum(len(cat.notes) for cat in report.categories.values())
    return (
        f"RunSpec validation {status} | errors={report.errors} "
        f"warnings={report.warnings} notes={notes}"
    )
