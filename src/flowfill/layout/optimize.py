"""
Finding the best element height

The layout is a flow layout where every element has the same height.
The bigger the height, the bigger the bounding box of the layout.
So we can bisect for the biggest height whose layout still fits into the box.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import auto
from typing import Callable, Sequence

from flowfill.config import g
from flowfill.layout import Layout, simulate
from flowfill.types import BugError, Enum, VisualElement


class Infeasible(Enum):
    """
    The reasons the height search can fail
    """

    LOWER_BOUND_REJECTED = auto()
    """Even the smallest height overflows the box"""
    UPPER_BOUND_ACCEPTED = auto()
    """The biggest height fits, so the search ceiling is too small"""


@dataclass(frozen=True, slots=True)
class Optimum:
    height: float
    layout: Layout
    evaluations: int


@dataclass(frozen=True, slots=True)
class Failure:
    reason: Infeasible
    message: str
    evaluations: int


OptimizeResult = Optimum | Failure


@dataclass
class SearchRange:
    """
    The state of a bisection.
    lo is known to be ok and hi is known to be not ok.
    The search stops when hi - lo <= tol
    """

    lo: float
    hi: float
    tol: float
    ok: Callable[[float], bool]


def bisect(search: SearchRange) -> float:
    """
    Finds the highest ok value in the range [lo, hi],
    assuming that lo is ok and that ok is monotone
    (true up to some value and false after it)
    """
    lo, hi, tol, ok = search.lo, search.hi, search.tol, search.ok
    while hi - lo > tol:
        mid = 0.5 * (lo + hi)
        if ok(mid):
            lo = mid
        else:
            hi = mid
    search.lo, search.hi = lo, hi
    # lo is known to be ok
    return lo


def optimize_height(
    elems: Sequence[VisualElement],
    max_width: float,
    max_height: float,
    spacing: float,
) -> OptimizeResult:
    """
    Finds the element height that, when applied to all the elements,
    will cause them to flow to cover as much of the available space
    as possible in the box of size max_width x max_height without spilling over.

    Returns an Optimum, or a Failure if the search bounds (g["lo"], g["hi"]) don't work for the box.
    Elements with an undefined aspect ratio raise.
    """
    evaluations = 0

    def ok(elt_height: float) -> bool:
        nonlocal evaluations
        evaluations += 1
        return simulate(elems, elt_height, max_width, spacing).fits(
            max_width, max_height
        )

    # The height is in pixels, being the displayed height of the elements.
    # Anything smaller than the tolerance of 1 is subpixel and won't be noticed.
    search = SearchRange(lo=g["lo"], hi=g["hi"], tol=g["tol"], ok=ok)
    if not ok(search.lo):
        return Failure(
            Infeasible.LOWER_BOUND_REJECTED,
            f"low value of {search.lo} is unexpectedly not ok",
            evaluations,
        )
    if ok(search.hi):
        return Failure(
            Infeasible.UPPER_BOUND_ACCEPTED,
            f"high value of {search.hi} is unexpectedly ok",
            evaluations,
        )
    height = bisect(search)
    layout = simulate(elems, height, max_width, spacing)
    if not layout.fits(max_width, max_height):
        raise BugError(f"The layout at the accepted height {height} doesn't fit")
    return Optimum(height, layout, evaluations)


def flow_fill(
    elems: Sequence[VisualElement],
    max_width: float,
    max_height: float,
    spacing: float,
) -> Layout | None:
    """
    Lays out the elements so that they all have the same height
    and fill a box of size max_width x max_height without spilling over.

    Returns None if there are no elements.
    If the best height can't be found, the layout is done at g["fallback_height"]
    """
    if not elems:
        return None
    match optimize_height(elems, max_width, max_height, spacing):
        case Optimum(layout=layout):
            return layout
        case Failure(message=message):
            logging.warning(f"bisecting failed: {message}")
            return simulate(elems, g["fallback_height"], max_width, spacing)


__all__ = [
    "Infeasible",
    "Optimum",
    "Failure",
    "OptimizeResult",
    "SearchRange",
    "bisect",
    "optimize_height",
    "flow_fill",
]
