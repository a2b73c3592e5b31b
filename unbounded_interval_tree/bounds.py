"""
Endpoint model for the interval tree.

A bound is Included(x), Excluded(x) or Unbounded. The same bound means
something different as a lower and as an upper endpoint, so every comparison
goes through a role encoding:

    lower role:  Included(x) -> (x, 0)   Excluded(x) -> (x, +1)   Unbounded -> -inf
    upper role:  Included(x) -> (x, 0)   Excluded(x) -> (x, -1)   Unbounded -> +inf

Keys of both roles are comparable with each other, which is what the overlap
test and the gap computation rely on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

# K represents the totally ordered type used for endpoint values
K = TypeVar('K')


@dataclass(frozen=True)
class Included(Generic[K]):
    """Closed endpoint: the value belongs to the range."""
    value: K

    def __repr__(self):
        return f"Included({self.value!r})"


@dataclass(frozen=True)
class Excluded(Generic[K]):
    """Open endpoint: the value does not belong to the range."""
    value: K

    def __repr__(self):
        return f"Excluded({self.value!r})"


class _UnboundedType(Enum):
    UNBOUNDED = "Unbounded"

    def __repr__(self):
        return "Unbounded"


Unbounded = _UnboundedType.UNBOUNDED

Bound = Union[Included[K], Excluded[K], _UnboundedType]
Range = tuple[Bound[K], Bound[K]]

_NEG_INF = (-1,)
_POS_INF = (1,)


def _check_bound(bound: Any) -> None:
    if bound is not Unbounded and not isinstance(bound, (Included, Excluded)):
        raise TypeError(f"Not a bound: {bound!r}")


def lower_key(bound: Bound) -> tuple:
    """Comparable key of a bound used as a lower endpoint."""
    if bound is Unbounded:
        return _NEG_INF
    if isinstance(bound, Included):
        return (0, bound.value, 0)
    if isinstance(bound, Excluded):
        return (0, bound.value, 1)
    raise TypeError(f"Not a bound: {bound!r}")


def upper_key(bound: Bound) -> tuple:
    """Comparable key of a bound used as an upper endpoint."""
    if bound is Unbounded:
        return _POS_INF
    if isinstance(bound, Included):
        return (0, bound.value, 0)
    if isinstance(bound, Excluded):
        return (0, bound.value, -1)
    raise TypeError(f"Not a bound: {bound!r}")


def range_key(r: Range) -> tuple:
    """Sort key of a range: lower bounds first, upper bounds break ties."""
    return (lower_key(r[0]), upper_key(r[1]))


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def cmp_ranges(r1: Range, r2: Range) -> int:
    """Three-way comparison of two ranges (-1, 0 or 1)."""
    return _cmp(range_key(r1), range_key(r2))


def cmp_upper(b1: Bound, b2: Bound) -> int:
    """Three-way comparison of two upper bounds (-1, 0 or 1)."""
    return _cmp(upper_key(b1), upper_key(b2))


def max_upper(b1: Bound, b2: Bound) -> Bound:
    """The larger of two upper bounds; ties keep the first one."""
    return b2 if upper_key(b1) < upper_key(b2) else b1


def flip(bound: Bound) -> Bound:
    """Swap inclusivity, keeping the very same endpoint value."""
    if isinstance(bound, Included):
        return Excluded(bound.value)
    if isinstance(bound, Excluded):
        return Included(bound.value)
    raise ValueError("Unbounded has no complement endpoint")


def spans(lower: Bound, upper: Bound) -> bool:
    """True if (lower, upper) contains at least one point of a dense order."""
    return lower_key(lower) <= upper_key(upper)


def to_range(obj: Any) -> Range:
    """
    Coerce a range-like value into a (lower, upper) tuple of bounds.

    Accepted forms:
        (lower, upper)   -- a pair of bounds, returned as-is
        range(a, b)      -- (Included(a), Excluded(b)), step must be 1
        slice(a, b)      -- same as range, None meaning Unbounded on that side

    Raises ValueError for ranges that hold no point, e.g. ]5,5[ or [7,3].
    """
    if isinstance(obj, tuple):
        if len(obj) != 2:
            raise ValueError(f"A range needs exactly two bounds, got {len(obj)}")
        _check_bound(obj[0])
        _check_bound(obj[1])
        r = obj
    elif isinstance(obj, range):
        if obj.step != 1:
            raise ValueError(f"Stepped ranges are not intervals: {obj!r}")
        r = (Included(obj.start), Excluded(obj.stop))
    elif isinstance(obj, slice):
        if obj.step not in (None, 1):
            raise ValueError(f"Stepped slices are not intervals: {obj!r}")
        lower = Unbounded if obj.start is None else Included(obj.start)
        upper = Unbounded if obj.stop is None else Excluded(obj.stop)
        r = (lower, upper)
    else:
        raise TypeError(f"Cannot interpret {type(obj).__name__} as a range")

    if not spans(*r):
        raise ValueError(f"Empty range: {format_range(r)}")
    return r


def closed(start: K, end: K) -> Range:
    """Range including both endpoints."""
    return (Included(start), Included(end))


def at_most(end: K) -> Range:
    """Range from minus infinity up to and including `end`."""
    return (Unbounded, Included(end))


# --- Display ---

def format_lower(bound: Bound) -> str:
    if bound is Unbounded:
        return "]-∞"
    if isinstance(bound, Included):
        return f"[{bound.value}"
    return f"]{bound.value}"


def format_upper(bound: Bound) -> str:
    if bound is Unbounded:
        return "∞["
    if isinstance(bound, Included):
        return f"{bound.value}]"
    return f"{bound.value}["


def format_range(r: Range) -> str:
    """Interval notation, e.g. `[1,3[` for (Included(1), Excluded(3))."""
    return f"{format_lower(r[0])},{format_upper(r[1])}"
