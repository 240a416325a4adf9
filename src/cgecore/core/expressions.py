"""Backend-agnostic equation expressions for CGE blocks.

Blocks describe their mathematics as small immutable syntax trees built
from the node classes in this module. A numerical backend lowers the
trees into its own constraint objects; this module only defines the
syntax, with no evaluation and no validation of indices or domains.

Nodes are frozen pydantic models, so equality and hashing are
structural: two independently built trees compare equal when their node
types and all children match. Nodes also order structurally (see
``sort_key``), which gives a reproducible order for sets of equations.

Example:
    >>> i = idx("i")
    >>> demand = equals(
    ...     var("QD", i),
    ...     sum_over("j", ["agr", "mfg"], multiply(param("a", i, idx("j")), var("XST", idx("j")))),
    ... )
    >>> print(demand)
    QD[i] = sum(j in {agr, mfg}, a[i, j] * XST[j])
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, ClassVar

from pydantic import BaseModel, Field

ATOM = 10


class EquationExpr(BaseModel):
    """Base class of all expression nodes."""

    tag: ClassVar[str] = "expr"
    precedence: ClassVar[int] = ATOM

    model_config = {"frozen": True}

    def children(self) -> tuple[EquationExpr, ...]:
        """Direct sub-expressions, in stored order."""
        return ()

    def sort_key(self) -> tuple[Any, ...]:
        """Structural key used for ordering nodes."""
        raise NotImplementedError("Subclasses must implement sort_key")

    def render(self) -> str:
        """Render the expression as text."""
        raise NotImplementedError("Subclasses must implement render")

    def __str__(self) -> str:
        return self.render()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, EquationExpr):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, EquationExpr):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, EquationExpr):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, EquationExpr):
            return NotImplemented
        return self.sort_key() >= other.sort_key()


# set elements (str, int, tuple, ...) or expression nodes such as EIndex
IndexTerm = Any


def _precedence(expr: EquationExpr) -> int:
    # negative literals bind like negation
    if isinstance(expr, EConst) and expr.value < 0:
        return ENeg.precedence
    return expr.precedence


def _operand(expr: EquationExpr, min_precedence: int) -> str:
    text = expr.render()
    if _precedence(expr) < min_precedence:
        return f"({text})"
    return text


def _index_key(idxs: tuple[IndexTerm, ...] | None) -> tuple[Any, ...]:
    if idxs is None:
        return (0,)
    # nested nodes sort before set elements; set elements group by type
    return (
        1,
        tuple(
            ("node", i.sort_key())
            if isinstance(i, EquationExpr)
            else ("sym", type(i).__name__, i if isinstance(i, str) else repr(i))
            for i in idxs
        ),
    )


def _render_ref(name: str, idxs: tuple[IndexTerm, ...] | None) -> str:
    if idxs is None:
        return name
    inner = ", ".join(i.render() if isinstance(i, EquationExpr) else str(i) for i in idxs)
    return f"{name}[{inner}]"


class EIndex(EquationExpr):
    """Index placeholder bound by an enclosing sum or product."""

    tag: ClassVar[str] = "index"

    name: str = Field(..., description="Index symbol")

    def __init__(self, name: str, **data: Any) -> None:
        super().__init__(name=name, **data)

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.name)

    def render(self) -> str:
        return self.name


class EVar(EquationExpr):
    """Variable reference, optionally indexed.

    Attributes:
        name: Variable symbol
        idxs: Index terms, or None for a scalar reference
    """

    tag: ClassVar[str] = "var"

    name: str = Field(..., description="Variable symbol")
    idxs: tuple[IndexTerm, ...] | None = Field(default=None, description="Index terms")

    def __init__(self, name: str, idxs: Sequence[IndexTerm] | None = None, **data: Any) -> None:
        super().__init__(name=name, idxs=None if idxs is None else tuple(idxs), **data)

    def children(self) -> tuple[EquationExpr, ...]:
        if self.idxs is None:
            return ()
        return tuple(i for i in self.idxs if isinstance(i, EquationExpr))

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.name, _index_key(self.idxs))

    def render(self) -> str:
        return _render_ref(self.name, self.idxs)


class EParam(EquationExpr):
    """Parameter reference, optionally indexed.

    Same shape as ``EVar``; parameters are exogenous, variables are solved
    for.
    """

    tag: ClassVar[str] = "param"

    name: str = Field(..., description="Parameter symbol")
    idxs: tuple[IndexTerm, ...] | None = Field(default=None, description="Index terms")

    def __init__(self, name: str, idxs: Sequence[IndexTerm] | None = None, **data: Any) -> None:
        super().__init__(name=name, idxs=None if idxs is None else tuple(idxs), **data)

    def children(self) -> tuple[EquationExpr, ...]:
        if self.idxs is None:
            return ()
        return tuple(i for i in self.idxs if isinstance(i, EquationExpr))

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.name, _index_key(self.idxs))

    def render(self) -> str:
        return _render_ref(self.name, self.idxs)


class EConst(EquationExpr):
    """Literal real number."""

    tag: ClassVar[str] = "const"

    value: float = Field(..., description="Constant value")

    def __init__(self, value: float, **data: Any) -> None:
        super().__init__(value=value, **data)

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.value)

    def render(self) -> str:
        text = repr(self.value)
        if text.endswith(".0"):
            text = text[:-2]
        return text


class ERaw(EquationExpr):
    """Opaque text for constructs the tree does not model.

    Backends decide whether to parse or reject the text.
    """

    tag: ClassVar[str] = "raw"
    precedence: ClassVar[int] = 0

    text: str = Field(..., description="Backend-interpreted text")

    def __init__(self, text: str, **data: Any) -> None:
        super().__init__(text=text, **data)

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.text)

    def render(self) -> str:
        return self.text


class ENeg(EquationExpr):
    """Unary negation."""

    tag: ClassVar[str] = "neg"
    precedence: ClassVar[int] = 3

    expr: EquationExpr = Field(..., description="Negated expression")

    def __init__(self, expr: EquationExpr, **data: Any) -> None:
        super().__init__(expr=expr, **data)

    def children(self) -> tuple[EquationExpr, ...]:
        return (self.expr,)

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.expr.sort_key())

    def render(self) -> str:
        return "-" + _operand(self.expr, self.precedence + 1)


class EAdd(EquationExpr):
    """N-ary addition. Term order only affects rendering."""

    tag: ClassVar[str] = "add"
    precedence: ClassVar[int] = 1

    terms: tuple[EquationExpr, ...] = Field(default_factory=tuple, description="Summands")

    def __init__(self, terms: Sequence[EquationExpr] = (), **data: Any) -> None:
        super().__init__(terms=tuple(terms), **data)

    def children(self) -> tuple[EquationExpr, ...]:
        return self.terms

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, tuple(t.sort_key() for t in self.terms))

    def render(self) -> str:
        if not self.terms:
            return "0"
        return " + ".join(_operand(t, self.precedence + 1) for t in self.terms)


class EMul(EquationExpr):
    """N-ary multiplication. Factor order only affects rendering."""

    tag: ClassVar[str] = "mul"
    precedence: ClassVar[int] = 2

    factors: tuple[EquationExpr, ...] = Field(default_factory=tuple, description="Factors")

    def __init__(self, factors: Sequence[EquationExpr] = (), **data: Any) -> None:
        super().__init__(factors=tuple(factors), **data)

    def children(self) -> tuple[EquationExpr, ...]:
        return self.factors

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, tuple(f.sort_key() for f in self.factors))

    def render(self) -> str:
        if not self.factors:
            return "1"
        return " * ".join(_operand(f, self.precedence) for f in self.factors)


class EDiv(EquationExpr):
    """Division. A zero denominator is left to the backend."""

    tag: ClassVar[str] = "div"
    precedence: ClassVar[int] = 2

    numerator: EquationExpr = Field(..., description="Numerator")
    denominator: EquationExpr = Field(..., description="Denominator")

    def __init__(self, numerator: EquationExpr, denominator: EquationExpr, **data: Any) -> None:
        super().__init__(numerator=numerator, denominator=denominator, **data)

    def children(self) -> tuple[EquationExpr, ...]:
        return (self.numerator, self.denominator)

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.numerator.sort_key(), self.denominator.sort_key())

    def render(self) -> str:
        return (
            f"{_operand(self.numerator, self.precedence)} / "
            f"{_operand(self.denominator, self.precedence + 1)}"
        )


class EPow(EquationExpr):
    """Power: base raised to exponent."""

    tag: ClassVar[str] = "pow"
    precedence: ClassVar[int] = 4

    base: EquationExpr = Field(..., description="Base")
    exponent: EquationExpr = Field(..., description="Exponent")

    def __init__(self, base: EquationExpr, exponent: EquationExpr, **data: Any) -> None:
        super().__init__(base=base, exponent=exponent, **data)

    def children(self) -> tuple[EquationExpr, ...]:
        return (self.base, self.exponent)

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.base.sort_key(), self.exponent.sort_key())

    def render(self) -> str:
        return (
            f"{_operand(self.base, self.precedence + 1)}^"
            f"{_operand(self.exponent, self.precedence + 1)}"
        )


class _EReduce(EquationExpr):
    """Indexed reduction of ``expr`` over ``index`` taking each value in ``domain``."""

    index: str = Field(..., description="Bound index symbol")
    domain: tuple[str, ...] = Field(default_factory=tuple, description="Index domain")
    expr: EquationExpr = Field(..., description="Body")

    def __init__(self, index: str, domain: Sequence[str], expr: EquationExpr, **data: Any) -> None:
        super().__init__(index=index, domain=tuple(domain), expr=expr, **data)

    def children(self) -> tuple[EquationExpr, ...]:
        return (self.expr,)

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.index, self.domain, self.expr.sort_key())

    def render(self) -> str:
        return f"{self.tag}({self.index} in {{{', '.join(self.domain)}}}, {self.expr.render()})"


class ESum(_EReduce):
    """Summation of ``expr`` over ``index`` taking each value in ``domain``."""

    tag: ClassVar[str] = "sum"


class EProd(_EReduce):
    """Product of ``expr`` over ``index`` taking each value in ``domain``."""

    tag: ClassVar[str] = "prod"


class EEq(EquationExpr):
    """One model equation, ``lhs = rhs``."""

    tag: ClassVar[str] = "eq"
    precedence: ClassVar[int] = 0

    lhs: EquationExpr = Field(..., description="Left-hand side")
    rhs: EquationExpr = Field(..., description="Right-hand side")

    def __init__(self, lhs: EquationExpr, rhs: EquationExpr, **data: Any) -> None:
        super().__init__(lhs=lhs, rhs=rhs, **data)

    def children(self) -> tuple[EquationExpr, ...]:
        return (self.lhs, self.rhs)

    def sort_key(self) -> tuple[Any, ...]:
        return (self.tag, self.lhs.sort_key(), self.rhs.sort_key())

    def render(self) -> str:
        return f"{self.lhs.render()} = {self.rhs.render()}"


# Traversal


def walk(expr: EquationExpr) -> Iterator[EquationExpr]:
    """Iterate over all nodes of a tree in pre-order."""
    stack = [expr]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))


def render(expr: EquationExpr) -> str:
    """Render an expression as text, keeping operand order."""
    return expr.render()


def symbols(expr: EquationExpr) -> dict[str, list[str]]:
    """Collect referenced variable and parameter names.

    Returns:
        ``{"variables": [...], "parameters": [...]}`` in first-occurrence order
    """
    found: dict[str, list[str]] = {"variables": [], "parameters": []}
    for node in walk(expr):
        if isinstance(node, EVar):
            bucket = found["variables"]
        elif isinstance(node, EParam):
            bucket = found["parameters"]
        else:
            continue
        if node.name not in bucket:
            bucket.append(node.name)
    return found


# Helper functions for building expressions


def _as_expr(value: EquationExpr | float) -> EquationExpr:
    if isinstance(value, EquationExpr):
        return value
    return EConst(value)


def idx(name: str) -> EIndex:
    """Create an index placeholder."""
    return EIndex(name)


def var(name: str, *indices: IndexTerm) -> EVar:
    """Create a variable reference; no indices gives a scalar reference."""
    return EVar(name, indices or None)


def param(name: str, *indices: IndexTerm) -> EParam:
    """Create a parameter reference; no indices gives a scalar reference."""
    return EParam(name, indices or None)


def const(value: float) -> EConst:
    """Create a constant."""
    return EConst(value)


def raw(text: str) -> ERaw:
    """Create an opaque, backend-interpreted expression."""
    return ERaw(text)


def add(*terms: EquationExpr | float) -> EAdd:
    """Add expressions; numbers become constants."""
    return EAdd([_as_expr(t) for t in terms])


def multiply(*factors: EquationExpr | float) -> EMul:
    """Multiply expressions; numbers become constants."""
    return EMul([_as_expr(f) for f in factors])


def negate(expr: EquationExpr | float) -> ENeg:
    """Negate an expression."""
    return ENeg(_as_expr(expr))


def divide(numerator: EquationExpr | float, denominator: EquationExpr | float) -> EDiv:
    """Divide two expressions."""
    return EDiv(_as_expr(numerator), _as_expr(denominator))


def power(base: EquationExpr | float, exponent: EquationExpr | float) -> EPow:
    """Raise base to power."""
    return EPow(_as_expr(base), _as_expr(exponent))


def sum_over(index: str, domain: Sequence[str], body: EquationExpr | float) -> ESum:
    """Sum ``body`` over the elements of ``domain`` bound to ``index``."""
    return ESum(index, domain, _as_expr(body))


def product_over(index: str, domain: Sequence[str], body: EquationExpr | float) -> EProd:
    """Multiply ``body`` over the elements of ``domain`` bound to ``index``."""
    return EProd(index, domain, _as_expr(body))


def equals(lhs: EquationExpr | float, rhs: EquationExpr | float) -> EEq:
    """Create an equation ``lhs = rhs``."""
    return EEq(_as_expr(lhs), _as_expr(rhs))
