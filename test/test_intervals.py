"""Hypothesis-based property tests for the interval list algebra."""

from typing import get_args

import pytest
from hypothesis import example, given
from hypothesis import strategies as st

from constguard.abstractions import intervals
from constguard.abstractions.intervals import (
    Bound,
    BoundKind,
    Comparison,
    Finite,
    Interval,
    IntervalList,
    NegInf,
    PosInf,
)

# ============================================================================
# BRUTE-FORCE POINT MODEL
# ============================================================================

# Every position an interval list built from values in [-10, 10] can
# distinguish: each value just below, at, and just above, plus infinities.
POSITIONS: list[Bound] = (
    [NegInf()]
    + [Finite(v, kind) for v in range(-12, 13) for kind in BoundKind]
    + [PosInf()]
)


def points(ranges: IntervalList) -> frozenset[Bound]:
    return frozenset(p for p in POSITIONS if intervals.contains(ranges, p))


# ============================================================================
# HYPOTHESIS STRATEGIES
# ============================================================================


def atoms() -> st.SearchStrategy[IntervalList]:
    """Generate the interval list of a single ``x <op> v`` comparison."""
    return st.builds(
        intervals.from_comparison,
        st.sampled_from(get_args(Comparison.__value__)),
        st.integers(min_value=-10, max_value=10),
    )


@st.composite
def interval_lists(draw: st.DrawFn) -> IntervalList:
    """Generate canonical lists by folding comparisons together."""
    result = draw(
        st.one_of(
            st.sampled_from([intervals.EMPTY, intervals.EVERYTHING]),
            atoms(),
        )
    )
    for _ in range(draw(st.integers(min_value=0, max_value=4))):
        combine = draw(st.sampled_from([intervals.union, intervals.intersect]))
        result = combine(result, draw(atoms()))
        if draw(st.booleans()):
            result = intervals.complement(result)
    return result


# ============================================================================
# BOUNDS
# ============================================================================


def test_bound_kind_order() -> None:
    assert Finite(3, BoundKind.UPPER_OPEN) < Finite(3) < Finite(3, BoundKind.LOWER_OPEN)
    assert Finite(3, BoundKind.LOWER_OPEN) < Finite(4, BoundKind.UPPER_OPEN)
    assert NegInf() < Finite(-(10**30), BoundKind.UPPER_OPEN)
    assert Finite(10**30, BoundKind.LOWER_OPEN) < PosInf()
    assert NegInf() == NegInf()
    assert Finite(2) == Finite(2, BoundKind.EXACT)
    assert Finite(2) != Finite(2, BoundKind.LOWER_OPEN)


@pytest.mark.parametrize(
    ("high", "low", "expected"),
    [
        (Finite(5, BoundKind.UPPER_OPEN), Finite(5), True),
        (Finite(5), Finite(5, BoundKind.LOWER_OPEN), True),
        (Finite(5, BoundKind.UPPER_OPEN), Finite(5, BoundKind.LOWER_OPEN), False),
        (Finite(5), Finite(6), False),
        (Finite(5), Finite(6, BoundKind.LOWER_OPEN), False),
        (PosInf(), Finite(5), False),
    ],
)
def test_touches(high: Bound, low: Bound, expected: bool) -> None:
    assert intervals.touches(high, low) is expected


def test_interval_rejects_bad_bounds() -> None:
    with pytest.raises(AssertionError):
        Interval(Finite(5), Finite(3))
    with pytest.raises(AssertionError):
        Interval(Finite(5, BoundKind.UPPER_OPEN), PosInf())
    with pytest.raises(AssertionError):
        Interval(NegInf(), Finite(5, BoundKind.LOWER_OPEN))


# ============================================================================
# COMPARISON ENCODING
# ============================================================================


def test_from_comparison_shapes() -> None:
    assert intervals.from_comparison("==", 4) == (Interval(Finite(4), Finite(4)),)
    assert intervals.from_comparison("!=", 4) == (
        Interval(NegInf(), Finite(4, BoundKind.UPPER_OPEN)),
        Interval(Finite(4, BoundKind.LOWER_OPEN), PosInf()),
    )
    assert intervals.from_comparison("<", 4) == (
        Interval(NegInf(), Finite(4, BoundKind.UPPER_OPEN)),
    )
    assert intervals.from_comparison(">=", 4) == (Interval(Finite(4), PosInf()),)


@given(
    st.sampled_from(get_args(Comparison.__value__)),
    st.integers(min_value=-50, max_value=50),
    st.integers(min_value=-50, max_value=50),
)
def test_from_comparison_is_exact_on_integers(op: Comparison, c: int, x: int) -> None:
    """Property: x is in the encoding of ``<op> c`` iff ``x <op> c`` holds."""
    ops = {
        "==": x == c,
        "!=": x != c,
        "<": x < c,
        ">": x > c,
        "<=": x <= c,
        ">=": x >= c,
    }
    assert intervals.contains(intervals.from_comparison(op, c), x) is ops[op]


# ============================================================================
# POINT-MODEL PROPERTY TESTS
# ============================================================================


@given(interval_lists(), interval_lists())
def test_intersect_matches_point_model(a: IntervalList, b: IntervalList) -> None:
    result = intervals.intersect(a, b)
    assert points(result) == points(a) & points(b)
    assert intervals.is_canonical(result)


@given(interval_lists(), interval_lists())
@example(intervals.from_comparison("<", 5), intervals.from_comparison(">=", 5))
@example(intervals.from_comparison(">", 5), intervals.from_comparison("<=", 5))
def test_union_matches_point_model(a: IntervalList, b: IntervalList) -> None:
    result = intervals.union(a, b)
    assert points(result) == points(a) | points(b)
    assert intervals.is_canonical(result)


@given(interval_lists())
def test_complement_matches_point_model(a: IntervalList) -> None:
    result = intervals.complement(a)
    assert points(result) == frozenset(POSITIONS) - points(a)
    assert intervals.is_canonical(result)


@given(interval_lists())
def test_generated_lists_are_canonical(a: IntervalList) -> None:
    assert intervals.is_canonical(a)


# ============================================================================
# ALGEBRAIC LAWS
# ============================================================================


@given(interval_lists(), interval_lists())
def test_commutativity(a: IntervalList, b: IntervalList) -> None:
    assert intervals.intersect(a, b) == intervals.intersect(b, a)
    assert intervals.union(a, b) == intervals.union(b, a)


@given(interval_lists(), interval_lists(), interval_lists())
def test_associativity(a: IntervalList, b: IntervalList, c: IntervalList) -> None:
    assert intervals.intersect(intervals.intersect(a, b), c) == intervals.intersect(
        a, intervals.intersect(b, c)
    )
    assert intervals.union(intervals.union(a, b), c) == intervals.union(
        a, intervals.union(b, c)
    )


@given(interval_lists())
@example(intervals.EMPTY)
@example(intervals.EVERYTHING)
@example(intervals.from_comparison("!=", 0))
def test_double_complement(a: IntervalList) -> None:
    assert intervals.complement(intervals.complement(a)) == a


@given(interval_lists(), interval_lists())
def test_de_morgan(a: IntervalList, b: IntervalList) -> None:
    assert intervals.complement(intervals.union(a, b)) == intervals.intersect(
        intervals.complement(a), intervals.complement(b)
    )
    assert intervals.complement(intervals.intersect(a, b)) == intervals.union(
        intervals.complement(a), intervals.complement(b)
    )


@given(interval_lists())
def test_identities(a: IntervalList) -> None:
    assert intervals.intersect(a, intervals.EVERYTHING) == a
    assert intervals.union(a, intervals.EMPTY) == a
    assert intervals.intersect(a, intervals.complement(a)) == intervals.EMPTY
    assert intervals.union(a, intervals.complement(a)) == intervals.EVERYTHING


# ============================================================================
# BOUNDARY EXAMPLES
# ============================================================================


def test_touching_ranges_merge() -> None:
    below = intervals.from_comparison("<", 5)
    assert intervals.union(below, intervals.from_comparison(">=", 5)) == (
        intervals.EVERYTHING
    )
    assert intervals.union(
        intervals.from_comparison(">", 5), intervals.from_comparison("<=", 5)
    ) == intervals.EVERYTHING


def test_open_bounds_leave_the_point_out() -> None:
    result = intervals.union(
        intervals.from_comparison("<", 5), intervals.from_comparison(">", 5)
    )
    assert result == intervals.from_comparison("!=", 5)
    assert intervals.complement(result) == intervals.from_comparison("==", 5)


def test_closed_bounds_meet_in_a_point() -> None:
    assert intervals.intersect(
        intervals.from_comparison("<=", 5), intervals.from_comparison(">=", 5)
    ) == intervals.from_comparison("==", 5)
    assert (
        intervals.intersect(
            intervals.from_comparison("<", 5), intervals.from_comparison(">", 5)
        )
        == intervals.EMPTY
    )


def test_disjoint_ranges_stay_apart() -> None:
    result = intervals.union(
        intervals.from_comparison("<", 0), intervals.from_comparison(">", 10)
    )
    assert len(result) == 2
    assert intervals.complement(result) == (Interval(Finite(0), Finite(10)),)


def test_to_boolean() -> None:
    assert intervals.to_boolean(intervals.EMPTY) is False
    assert intervals.to_boolean(intervals.EVERYTHING) is True
    assert intervals.to_boolean(intervals.from_comparison(">", 5)) is None
    assert intervals.to_boolean(intervals.from_comparison("!=", 5)) is None


def test_format() -> None:
    assert intervals.format_intervals(intervals.EMPTY) == "{}"
    assert (
        intervals.format_intervals(intervals.from_comparison("!=", 3))
        == "(-inf, 3) | (3, +inf)"
    )
    assert intervals.format_intervals(intervals.from_comparison("==", 3)) == "[3, 3]"
