"""Tests for the backend contract."""

from typing import Any

import numpy as np
import pytest

from cgecore.assembly import build_spec
from cgecore.backends import Backend, Solution
from cgecore.blocks import Block, VariableSpec
from cgecore.core import ClosureSpec, Mappings, ScenarioSpec, Sets, section
from cgecore.core.expressions import equals, var


class RecordingBlock(Block):
    """Block that logs build and report calls to a shared list."""

    log: Any = None

    def build(self, context, spec):
        self.log.append(("build", self.name))
        context.add_variable(VariableSpec(name=f"X_{self.name}"))
        context.add_equation(f"eq_{self.name}", equals(var(f"X_{self.name}"), 1))

    def report(self, solution):
        self.log.append(("report", self.name))
        return float(solution.get_variable(f"X_{self.name}")[0])


class FixedPointBackend(Backend):
    """Backend that sets every declared variable to one."""

    def solve(self, options=None):
        return Solution(
            run_name=self.spec.name,
            status="optimal",
            variables={name: np.ones(1) for name in self.context.variables},
            iterations=1,
        )


def make_spec(log):
    blocks = {name: RecordingBlock(name=name, log=log) for name in ["prod", "trade", "market"]}
    return build_spec(
        "Demo",
        Sets(commodities=["a"], activities=["a"], factors=["f"], institutions=["h"]),
        Mappings(activity_to_output={"a": "a"}),
        [
            section("production", [blocks["prod"]]),
            section("trade", [blocks["trade"], blocks["market"]]),
        ],
        closure=ClosureSpec(numeraire="a"),
        scenario=ScenarioSpec(name="baseline"),
    )


class TestSolution:
    """Tests for Solution class."""

    def test_solution_creation(self):
        """Test solution creation."""
        sol = Solution(run_name="Demo", status="optimal", variables={"X": np.array([1.0, 2.0])})
        assert sol.run_name == "Demo"
        assert np.array_equal(sol.get_variable("X"), np.array([1.0, 2.0]))
        assert sol.get_variable("MISSING") is None

    def test_to_dict(self):
        """Test conversion with arrays as lists."""
        sol = Solution(run_name="Demo", variables={"X": np.array([1.0, 2.0])}, iterations=3)
        assert sol.to_dict() == {
            "run_name": "Demo",
            "status": "unknown",
            "variables": {"X": [1.0, 2.0]},
            "iterations": 3,
        }
        assert "vars=1" in repr(sol)


class TestBackend:
    """Tests for the Backend lifecycle."""

    def test_backend_is_abstract(self):
        """Test that solve must be implemented."""
        with pytest.raises(TypeError):
            Backend()

    def test_build_in_block_order(self):
        """Test that blocks build in RunSpec order into one context."""
        log = []
        backend = FixedPointBackend(solver="fixed")
        context = backend.build(make_spec(log))
        assert log == [("build", "prod"), ("build", "trade"), ("build", "market")]
        assert list(context.equations) == ["eq_prod", "eq_trade", "eq_market"]
        assert backend.context is context

    def test_solve_and_report(self):
        """Test the full build, solve, report cycle."""
        log = []
        backend = FixedPointBackend()
        backend.build(make_spec(log))
        solution = backend.solve()
        assert solution.status == "optimal"
        assert backend.report(solution) == [1.0, 1.0, 1.0]
        assert [entry for entry in log if entry[0] == "report"] == [
            ("report", "prod"),
            ("report", "trade"),
            ("report", "market"),
        ]

    def test_report_requires_build(self):
        """Test that reporting before building fails."""
        with pytest.raises(RuntimeError, match="call build"):
            FixedPointBackend().report(Solution(run_name="Demo"))

    def test_repr(self):
        """Test backend representation."""
        assert repr(FixedPointBackend(solver="fixed")) == "FixedPointBackend(solver=fixed)"
