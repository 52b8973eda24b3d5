"""Symbolic values a guard expression can evaluate to, and their operators.

Every operator accepts any ``AbstractValue`` and never raises: a situation
the lattice cannot decide becomes ``Unknown`` (or a ``RangeSet`` that does
not collapse), which then absorbs the rest of the evaluation.
"""

import operator as op
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Literal, Self

from constguard import config
from constguard.abstractions import intervals
from constguard.abstractions.intervals import Comparison, IntervalList

type Arithmetic = Literal["+", "-", "*", "/", "//", "%", "**"]
type Logical = Literal["and", "or"]
type BinaryOp = Logical | Comparison | Arithmetic
type UnaryOp = Literal["not", "+", "-"]

COMPARISONS: dict[Comparison, Callable[[int, int], bool]] = {
    "==": op.eq,
    "!=": op.ne,
    "<": op.lt,
    ">": op.gt,
    "<=": op.le,
    ">=": op.ge,
}

# ``v < x`` constrains ``x`` the same way ``x > v`` does.
MIRRORED: dict[Comparison, Comparison] = {
    "==": "==",
    "!=": "!=",
    "<": ">",
    ">": "<",
    "<=": ">=",
    ">=": "<=",
}


@dataclass(frozen=True)
class Unknown:
    def __str__(self) -> str:
        return "?"


@dataclass(frozen=True)
class IntValue:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VarRef:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RangeSet:
    """
    Per-variable integer constraints of a compound condition.

    ``entries`` holds ``(name, intervals)`` pairs sorted by name. Names in
    ``tainted`` had their constraint mixed with an unrelated clause and are
    ignored when the condition is collapsed to a verdict.
    """

    entries: tuple[tuple[str, IntervalList], ...]
    tainted: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(
        cls, constraints: Mapping[str, IntervalList], tainted: Iterable[str] = ()
    ) -> Self:
        entries = tuple(sorted(constraints.items(), key=lambda item: item[0]))
        return cls(entries, frozenset(tainted))

    @property
    def constraints(self) -> dict[str, IntervalList]:
        return dict(self.entries)

    def untainted(self) -> dict[str, IntervalList]:
        """Return the constraints that still count towards the verdict."""
        return {
            name: ranges for name, ranges in self.entries if name not in self.tainted
        }

    def single_variable(self) -> str | None:
        """Return the variable if exactly one untainted variable is constrained."""
        if self.tainted or len(self.entries) != 1:
            return None
        return self.entries[0][0]

    def collapse(self) -> bool | None:
        live = self.untainted()
        if not live:
            # nothing but tainted constraints: the truth depends on them
            return None if self.tainted else True
        verdicts = [intervals.to_boolean(ranges) for ranges in live.values()]
        if False in verdicts:
            return False
        if True in verdicts:
            return True
        return None

    def __str__(self) -> str:
        parts = []
        for name, ranges in self.entries:
            mark = "~" if name in self.tainted else ""
            parts.append(f"{mark}{name} in {intervals.format_intervals(ranges)}")
        return "{" + ", ".join(parts) + "}"


type AbstractValue = Unknown | IntValue | BoolValue | VarRef | RangeSet


def checked(value: int) -> AbstractValue:
    """Wrap an integer result, giving up on values outside the native width."""
    return IntValue(value) if config.fits(value) else Unknown()


def to_int(value: AbstractValue) -> int | None:
    match value:
        case BoolValue(value=b):
            return int(b)
        case IntValue(value=n):
            return n
        case _:
            return None


def to_bool(value: AbstractValue) -> bool | None:
    match value:
        case BoolValue(value=b):
            return b
        case IntValue(value=n):
            return n != 0
        case RangeSet():
            return value.collapse()
        case _:
            return None


def _settled(value: AbstractValue, verdict: bool) -> AbstractValue:
    """Return the operand that decided a short-circuit, as Python would."""
    if isinstance(value, (IntValue, BoolValue)):
        return value
    return BoolValue(verdict)


def _merge(
    left: RangeSet,
    right: RangeSet,
    combine: Callable[[IntervalList, IntervalList], IntervalList],
    absorbing: IntervalList,
    neutral: IntervalList,
    verdict: bool,
) -> AbstractValue:
    """
    Combine two range sets variable by variable.

    A variable constrained on only one side is tainted. An untainted
    variable whose combined constraint reaches ``absorbing`` decides the
    whole condition; one that reaches ``neutral`` no longer constrains it.
    """
    tainted = set(left.tainted | right.tainted)
    lhs, rhs = left.constraints, right.constraints
    merged: dict[str, IntervalList] = {}
    for name in sorted(lhs.keys() | rhs.keys()):
        if name in lhs and name in rhs:
            ranges = combine(lhs[name], rhs[name])
        else:
            ranges = lhs[name] if name in lhs else rhs[name]
            tainted.add(name)

        if name not in tainted:
            if ranges == absorbing:
                return BoolValue(verdict)
            if ranges == neutral:
                continue
        merged[name] = ranges
    return RangeSet.of(merged, tainted)


def logical_and(left: AbstractValue, right: AbstractValue) -> AbstractValue:
    match to_bool(left):
        case False:
            return _settled(left, False)
        case True:
            return right
    if isinstance(left, RangeSet) and isinstance(right, RangeSet):
        return _merge(
            left,
            right,
            intervals.intersect,
            absorbing=intervals.EMPTY,
            neutral=intervals.EVERYTHING,
            verdict=False,
        )
    return Unknown()


def logical_or(left: AbstractValue, right: AbstractValue) -> AbstractValue:
    match to_bool(left):
        case True:
            return _settled(left, True)
        case False:
            return right
    if isinstance(left, RangeSet) and isinstance(right, RangeSet):
        return _merge(
            left,
            right,
            intervals.union,
            absorbing=intervals.EVERYTHING,
            neutral=intervals.EMPTY,
            verdict=True,
        )
    return Unknown()


def logical_not(value: AbstractValue) -> AbstractValue:
    verdict = to_bool(value)
    if verdict is not None:
        return BoolValue(not verdict)
    match value:
        case RangeSet(entries=entries, tainted=tainted):
            return RangeSet.of(
                {
                    name: ranges if name in tainted else intervals.complement(ranges)
                    for name, ranges in entries
                },
                tainted,
            )
        case _:
            return Unknown()


def compare(
    left: AbstractValue, cmp: Comparison, right: AbstractValue
) -> AbstractValue:
    lhs, rhs = to_int(left), to_int(right)
    if lhs is not None and rhs is not None:
        return BoolValue(COMPARISONS[cmp](lhs, rhs))
    match (left, right):
        case (VarRef(name=name), _) if rhs is not None:
            return RangeSet.of({name: intervals.from_comparison(cmp, rhs)})
        case (_, VarRef(name=name)) if lhs is not None:
            mirrored = intervals.from_comparison(MIRRORED[cmp], lhs)
            return RangeSet.of({name: mirrored})
        case _:
            return Unknown()


def chain_compare(
    left: AbstractValue,
    middle: AbstractValue,
    cmp: Comparison,
    right: AbstractValue,
) -> AbstractValue:
    """
    Evaluate the next link of ``a < b < c`` given ``left = (a < b)``.

    ``middle`` is the shared operand ``b``. A range set on the left is only
    extended when it constrains that very variable and nothing else.
    """
    match left:
        case RangeSet():
            name = left.single_variable()
            if name is None or middle != VarRef(name):
                return Unknown()
            return logical_and(left, compare(VarRef(name), cmp, right))
        case _:
            return logical_and(left, compare(middle, cmp, right))


def _power(base: int, exponent: int) -> AbstractValue:
    if exponent < 0:
        return Unknown()
    # |base| ** exponent >= 2 ** ((bit_length - 1) * exponent)
    magnitude = abs(base).bit_length() - 1
    if abs(base) > 1 and magnitude * exponent >= config.INT_BITS:
        return Unknown()
    return checked(base**exponent)


def arithmetic(
    left: AbstractValue, arith: Arithmetic, right: AbstractValue
) -> AbstractValue:
    a, b = to_int(left), to_int(right)
    if a is None or b is None:
        return Unknown()
    match arith:
        case "+":
            return checked(a + b)
        case "-":
            return checked(a - b)
        case "*":
            return checked(a * b)
        case "/":
            # exact quotients only, no floating point
            if b == 0 or a % b != 0:
                return Unknown()
            return checked(a // b)
        case "//":
            return Unknown() if b == 0 else checked(a // b)
        case "%":
            return Unknown() if b == 0 else checked(a % b)
        case "**":
            return _power(a, b)
        case _:
            return Unknown()


def unary(uop: UnaryOp, operand: AbstractValue) -> AbstractValue:
    match uop:
        case "not":
            return logical_not(operand)
        case "+":
            n = to_int(operand)
            return Unknown() if n is None else IntValue(n)
        case "-":
            n = to_int(operand)
            return Unknown() if n is None else checked(-n)
        case _:
            return Unknown()


def binary(bop: BinaryOp, left: AbstractValue, right: AbstractValue) -> AbstractValue:
    match bop:
        case "and":
            return logical_and(left, right)
        case "or":
            return logical_or(left, right)
        case "==" | "!=" | "<" | ">" | "<=" | ">=":
            return compare(left, bop, right)
        case "+" | "-" | "*" | "/" | "//" | "%" | "**":
            return arithmetic(left, bop, right)
        case _:
            return Unknown()
