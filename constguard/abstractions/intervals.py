"""Disjoint integer interval lists with exact boundary algebra.

A bound is either an infinity or a finite value tagged with a boundary kind.
The kinds place an open upper bound at ``v`` just below the closed bound at
``v``, which sits just below an open lower bound at ``v``:

    Finite(v, UPPER_OPEN) < Finite(v, EXACT) < Finite(v, LOWER_OPEN)

An ``IntervalList`` is a tuple of intervals kept strictly sorted, pairwise
non-overlapping and non-touching by every function in this module.
"""

from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering
from typing import Literal

type Comparison = Literal["==", "!=", "<", ">", "<=", ">="]


class BoundKind(IntEnum):
    UPPER_OPEN = 0
    EXACT = 1
    LOWER_OPEN = 2


@total_ordering
class Bound:
    """A position on the integer line, extended with both infinities."""

    def _key(self) -> tuple[int, ...]:
        raise NotImplementedError

    def __lt__(self, other: "Bound") -> bool:
        if not isinstance(other, Bound):
            return NotImplemented
        return self._key() < other._key()


@dataclass(frozen=True)
class NegInf(Bound):
    def _key(self) -> tuple[int, ...]:
        return (0,)

    def __str__(self) -> str:
        return "-inf"


@dataclass(frozen=True)
class PosInf(Bound):
    def _key(self) -> tuple[int, ...]:
        return (2,)

    def __str__(self) -> str:
        return "+inf"


@dataclass(frozen=True)
class Finite(Bound):
    value: int
    kind: BoundKind = BoundKind.EXACT

    def _key(self) -> tuple[int, ...]:
        return (1, self.value, self.kind)

    def __str__(self) -> str:
        match self.kind:
            case BoundKind.UPPER_OPEN:
                return f"{self.value}-"
            case BoundKind.LOWER_OPEN:
                return f"{self.value}+"
            case _:
                return str(self.value)


@dataclass(frozen=True)
class Interval:
    low: Bound
    high: Bound

    def __post_init__(self) -> None:
        assert self.low <= self.high, f"empty interval {self}"
        assert not isinstance(self.low, PosInf), f"bad low bound {self.low}"
        assert not isinstance(self.high, NegInf), f"bad high bound {self.high}"
        assert not (
            isinstance(self.low, Finite) and self.low.kind is BoundKind.UPPER_OPEN
        ), f"low bound cannot be upper-open: {self}"
        assert not (
            isinstance(self.high, Finite) and self.high.kind is BoundKind.LOWER_OPEN
        ), f"high bound cannot be lower-open: {self}"

    def __contains__(self, point: Bound) -> bool:
        return self.low <= point <= self.high

    def __str__(self) -> str:
        left = "(" if _opens_low(self.low) else "["
        right = ")" if _opens_high(self.high) else "]"
        return f"{left}{_plain(self.low)}, {_plain(self.high)}{right}"


type IntervalList = tuple[Interval, ...]

UNIVERSAL = Interval(NegInf(), PosInf())
EMPTY: IntervalList = ()
EVERYTHING: IntervalList = (UNIVERSAL,)


def _opens_low(bound: Bound) -> bool:
    return isinstance(bound, NegInf) or (
        isinstance(bound, Finite) and bound.kind is BoundKind.LOWER_OPEN
    )


def _opens_high(bound: Bound) -> bool:
    return isinstance(bound, PosInf) or (
        isinstance(bound, Finite) and bound.kind is BoundKind.UPPER_OPEN
    )


def _plain(bound: Bound) -> str:
    match bound:
        case Finite(value=v):
            return str(v)
        case _:
            return str(bound)


def from_comparison(op: Comparison, value: int) -> IntervalList:
    """Return the values ``x`` satisfying ``x <op> value``."""
    match op:
        case "==":
            return (Interval(Finite(value), Finite(value)),)
        case "!=":
            return (
                Interval(NegInf(), Finite(value, BoundKind.UPPER_OPEN)),
                Interval(Finite(value, BoundKind.LOWER_OPEN), PosInf()),
            )
        case "<":
            return (Interval(NegInf(), Finite(value, BoundKind.UPPER_OPEN)),)
        case "<=":
            return (Interval(NegInf(), Finite(value)),)
        case ">":
            return (Interval(Finite(value, BoundKind.LOWER_OPEN), PosInf()),)
        case ">=":
            return (Interval(Finite(value), PosInf()),)
        case _:
            raise NotImplementedError(f"Op {op} not implemented")


def touches(high: Bound, low: Bound) -> bool:
    """
    Return true if ``low`` starts immediately after ``high`` ends.

    ``..., v)`` touches ``[v, ...`` and ``..., v]`` touches ``(v, ...``;
    ``..., v)`` and ``(v, ...`` leave ``v`` itself uncovered.
    """
    match (high, low):
        case (
            Finite(value=h, kind=BoundKind.UPPER_OPEN),
            Finite(value=l, kind=BoundKind.EXACT),
        ) | (
            Finite(value=h, kind=BoundKind.EXACT),
            Finite(value=l, kind=BoundKind.LOWER_OPEN),
        ):
            return h == l
        case _:
            return False


def intersect(a: IntervalList, b: IntervalList) -> IntervalList:
    result: list[Interval] = []
    i = j = 0
    while i < len(a) and j < len(b):
        low = max(a[i].low, b[j].low)
        high = min(a[i].high, b[j].high)
        if low <= high:
            result.append(Interval(low, high))
        # advance whichever interval ends first
        if a[i].high < b[j].high:
            i += 1
        elif b[j].high < a[i].high:
            j += 1
        else:
            i += 1
            j += 1
    return tuple(result)


def union(a: IntervalList, b: IntervalList) -> IntervalList:
    result: list[Interval] = []
    buffer: Interval | None = None
    i = j = 0
    while i < len(a) or j < len(b):
        if j >= len(b) or (i < len(a) and a[i].low <= b[j].low):
            current = a[i]
            i += 1
        else:
            current = b[j]
            j += 1

        if buffer is None:
            buffer = current
        elif current.low <= buffer.high or touches(buffer.high, current.low):
            buffer = Interval(buffer.low, max(buffer.high, current.high))
        else:
            result.append(buffer)
            buffer = current

    if buffer is not None:
        result.append(buffer)
    return tuple(result)


def _just_below(low: Bound) -> Bound:
    """Return the high bound of the gap that ends right before ``low``."""
    match low:
        case Finite(value=v, kind=BoundKind.EXACT):
            return Finite(v, BoundKind.UPPER_OPEN)
        case Finite(value=v, kind=BoundKind.LOWER_OPEN):
            return Finite(v, BoundKind.EXACT)
        case _:
            raise ValueError(f"Invalid low bound: {low}")


def _just_above(high: Bound) -> Bound:
    """Return the low bound of the gap that starts right after ``high``."""
    match high:
        case Finite(value=v, kind=BoundKind.EXACT):
            return Finite(v, BoundKind.LOWER_OPEN)
        case Finite(value=v, kind=BoundKind.UPPER_OPEN):
            return Finite(v, BoundKind.EXACT)
        case _:
            raise ValueError(f"Invalid high bound: {high}")


def complement(intervals: IntervalList) -> IntervalList:
    result: list[Interval] = []
    gap_low: Bound | None = NegInf()
    for interval in intervals:
        if not isinstance(interval.low, NegInf):
            assert gap_low is not None
            result.append(Interval(gap_low, _just_below(interval.low)))
        if isinstance(interval.high, PosInf):
            gap_low = None
        else:
            gap_low = _just_above(interval.high)
    if gap_low is not None:
        result.append(Interval(gap_low, PosInf()))
    return tuple(result)


def to_boolean(intervals: IntervalList) -> bool | None:
    """Collapse a constraint to a verdict: empty is false, everything is true."""
    if not intervals:
        return False
    if intervals == EVERYTHING:
        return True
    return None


def contains(intervals: IntervalList, point: int | Bound) -> bool:
    """Check membership of an integer, or of a bound position."""
    if isinstance(point, int):
        point = Finite(point)
    return any(point in interval for interval in intervals)


def is_canonical(intervals: IntervalList) -> bool:
    """Check the sorted, disjoint and maximally merged invariant."""
    return all(
        prev.high < nxt.low and not touches(prev.high, nxt.low)
        for prev, nxt in zip(intervals, intervals[1:])
    )


def format_intervals(intervals: IntervalList) -> str:
    if not intervals:
        return "{}"
    return " | ".join(map(str, intervals))
