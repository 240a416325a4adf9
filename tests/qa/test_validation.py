"""Tests for strict and diagnostic RunSpec validation."""

import json

import numpy as np
import pandas as pd
import pytest

from cgecore.blocks import Block
from cgecore.core import ClosureSpec, Mappings, ModelSpec, RunSpec, ScenarioSpec, Sets
from cgecore.errors import EmptySetError
from cgecore.qa import (
    ReportCategory,
    ValidationReport,
    empty_core_sets,
    format_report_summary,
    validate,
    validate_spec,
)


class DummyBlock(Block):
    pass


FULL_SETS = {"commodities": ["a"], "activities": ["a"], "factors": ["f"], "institutions": ["h"]}


def make_spec(numeraire="a", blocks=None, **set_overrides):
    set_args = {**FULL_SETS, **set_overrides}
    return RunSpec(
        name="Demo",
        model=ModelSpec(
            blocks=[DummyBlock()] if blocks is None else blocks,
            sets=Sets(**set_args),
            mappings=Mappings(activity_to_output={"a": "a"}),
        ),
        closure=ClosureSpec(numeraire=numeraire),
        scenario=ScenarioSpec(name="baseline"),
    )


def balanced_sam() -> pd.DataFrame:
    accounts = ["a", "f", "h"]
    values = np.array(
        [
            [0.0, 0.0, 100.0],
            [100.0, 0.0, 0.0],
            [0.0, 100.0, 0.0],
        ]
    )
    return pd.DataFrame(values, index=accounts, columns=accounts)


class TestEmptyCoreSets:
    """Tests for the shared core-set predicate."""

    def test_none_empty(self):
        """Test a complete set of domains."""
        assert empty_core_sets(Sets(**FULL_SETS)) == []

    def test_canonical_order(self):
        """Test that empty sets are reported in canonical order."""
        assert empty_core_sets(Sets()) == ["commodities", "activities", "factors", "institutions"]
        assert empty_core_sets(Sets(commodities=["a"], factors=["f"])) == [
            "activities",
            "institutions",
        ]


class TestStrictValidation:
    """Tests for validate."""

    def test_valid_spec(self):
        """Test that a complete spec passes."""
        assert validate(make_spec()) is True

    @pytest.mark.parametrize("name", ["commodities", "activities", "factors", "institutions"])
    def test_each_empty_set_fails(self, name):
        """Test that every core set is checked."""
        with pytest.raises(EmptySetError, match=f"Sets.{name} is empty") as exc:
            validate(make_spec(**{name: []}))
        assert exc.value.set_name == name

    def test_first_violation_reported(self):
        """Test that validation stops at the first empty set."""
        with pytest.raises(EmptySetError) as exc:
            validate(make_spec(factors=[], activities=[]))
        assert exc.value.set_name == "activities"

    def test_idempotent(self):
        """Test repeated validation gives the same result."""
        spec = make_spec()
        assert [validate(spec) for _ in range(3)] == [True, True, True]
        bad = make_spec(commodities=[])
        for _ in range(3):
            with pytest.raises(EmptySetError):
                validate(bad)

    def test_empty_blocks_pass_strict(self):
        """Test that strict validation does not check blocks."""
        assert validate(make_spec(blocks=[])) is True


class TestDiagnosticValidation:
    """Tests for validate_spec."""

    def test_report_shape(self):
        """Test categories and message kinds."""
        report = validate_spec(make_spec())
        assert isinstance(report, ValidationReport)
        assert list(report.categories) == ["structural", "closure", "accounting"]
        for cat in report.categories.values():
            assert cat.errors == [] or isinstance(cat.errors[0], str)
            assert isinstance(cat.warnings, list)
            assert isinstance(cat.notes, list)

    def test_valid_spec_without_data(self):
        """Test a valid spec without benchmark data."""
        report = validate_spec(make_spec())
        assert report.ok
        assert report.errors == 0
        assert report.warnings == 0
        assert report.category("accounting").notes == [
            "No data provided for SAM or flow consistency checks"
        ]

    def test_numeraire_outside_sets_warns(self):
        """Test that an unknown numeraire is a closure warning, not an error."""
        spec = make_spec(numeraire="zzz")
        assert validate(spec) is True
        report = validate_spec(spec)
        assert report.ok
        assert report.errors == 0
        assert report.warnings == 1
        assert report.category(ReportCategory.CLOSURE).warnings == [
            "Numeraire zzz not found in commodities or factors"
        ]

    def test_factor_numeraire_accepted(self):
        """Test that a factor numeraire raises no warning."""
        assert validate_spec(make_spec(numeraire="f")).warnings == 0

    def test_structural_errors_collected(self):
        """Test that all structural problems are reported at once."""
        spec = make_spec(blocks=[], commodities=[], institutions=[])
        report = validate_spec(spec)
        assert not report.ok
        assert report.category("structural").errors == [
            "RunSpec has no blocks",
            "Sets.commodities is empty",
            "Sets.institutions is empty",
        ]
        assert report.errors == 3

    def test_empty_numeraire_sets_also_warns(self):
        """Test that closure checks run alongside structural errors."""
        report = validate_spec(make_spec(commodities=[], factors=[]))
        assert report.errors == 2
        assert report.warnings == 1

    @pytest.mark.parametrize(
        "overrides, blocks, data",
        [
            ({}, None, None),
            ({"commodities": []}, [], None),
            ({"factors": [], "activities": []}, None, "not a sam"),
            ({}, [], balanced_sam()),
            ({"institutions": []}, None, object()),
        ],
    )
    def test_ok_iff_no_errors(self, overrides, blocks, data):
        """Test that ok mirrors the total error count."""
        report = validate_spec(make_spec(blocks=blocks, **overrides), data=data)
        total = sum(len(cat.errors) for cat in report.categories.values())
        assert report.errors == total
        assert report.ok == (total == 0)

    def test_never_raises_on_broken_input(self):
        """Test that unusable input is reported, not raised."""
        report = validate_spec(object())
        assert not report.ok
        assert report.category("structural").errors
        assert report.category("closure").errors

    def test_to_dict_and_json(self, tmp_path):
        """Test serialization of the report."""
        report = validate_spec(make_spec(numeraire="zzz"))
        payload = report.to_dict()
        assert payload["ok"] is True
        assert payload["categories"]["closure"]["warnings"]
        path = tmp_path / "reports" / "validation.json"
        report.save_json(path)
        assert json.loads(path.read_text()) == payload

    def test_messages_and_summary(self):
        """Test flattened messages and the summary line."""
        report = validate_spec(make_spec(numeraire="zzz", blocks=[]))
        assert report.messages("errors") == ["[structural] RunSpec has no blocks"]
        assert report.messages("warnings") == [
            "[closure] Numeraire zzz not found in commodities or factors"
        ]
        assert format_report_summary(report) == (
            "RunSpec validation FAIL | errors=1 warnings=1 notes=1"
        )

    def test_unknown_category(self):
        """Test lookup of a category not in the report."""
        with pytest.raises(KeyError):
            validate_spec(make_spec()).category("markets")


class TestAccountingChecks:
    """Tests for benchmark SAM balance checks."""

    def test_balanced_sam(self):
        """Test that a balanced SAM passes without notes."""
        report = validate_spec(make_spec(), data=balanced_sam())
        accounting = report.category("accounting")
        assert report.ok
        assert accounting.errors == []
        assert accounting.notes == []

    def test_unbalanced_account(self):
        """Test that a row/column mismatch is an accounting error."""
        sam = balanced_sam()
        sam.loc["a", "h"] = 120.0
        report = validate_spec(make_spec(), data=sam)
        errors = report.category("accounting").errors
        assert not report.ok
        assert len(errors) == 2
        assert errors[0].startswith("Account a is unbalanced")
        assert errors[1].startswith("Account h is unbalanced")

    def test_within_tolerance(self):
        """Test that tiny differences are accepted."""
        sam = balanced_sam()
        sam.loc["a", "h"] = 100.0 + 1e-9
        assert validate_spec(make_spec(), data=sam).ok

    def test_custom_tolerance(self):
        """Test that tolerances are configurable."""
        sam = balanced_sam()
        sam.loc["a", "h"] = 101.0
        assert not validate_spec(make_spec(), data=sam).ok
        assert validate_spec(make_spec(), data=sam, abs_tol=5.0).ok

    def test_mismatched_accounts(self):
        """Test rows and columns that list different accounts."""
        sam = balanced_sam()
        sam.columns = ["a", "f", "x"]
        report = validate_spec(make_spec(), data=sam)
        assert report.category("accounting").errors == [
            "Benchmark SAM rows and columns do not list the same accounts"
        ]

    def test_non_numeric_sam(self):
        """Test a SAM with text entries."""
        sam = pd.DataFrame([["x"]], index=["a"], columns=["a"])
        report = validate_spec(make_spec(), data=sam)
        assert report.category("accounting").errors[0].startswith("Benchmark SAM is not numeric")

    def test_wrapped_dataframe(self):
        """Test SAM containers that expose a dataframe attribute."""

        class SamContainer:
            dataframe = balanced_sam()

        assert validate_spec(make_spec(), data=SamContainer()).ok

    def test_unsupported_data_is_noted(self):
        """Test that other data types skip checks with a note."""
        report = validate_spec(make_spec(), data={"sam": []})
        assert report.ok
        assert report.category("accounting").notes == [
            "Unsupported benchmark data type dict; SAM balance checks skipped"
        ]
