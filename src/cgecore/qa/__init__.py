"""Strict and diagnostic validation of RunSpecs."""

from cgecore.qa.checks import empty_core_sets, validate, validate_spec
from cgecore.qa.reporting import (
    CategoryReport,
    ReportCategory,
    ValidationReport,
    format_report_summary,
)

__all__ = [
    "validate",
    "validate_spec",
    "empty_core_sets",
    "CategoryReport",
    "ReportCategory",
    "ValidationReport",
    "format_report_summary",
]
