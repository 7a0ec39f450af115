import logging
import math
import random

import pytest

from flowfill.layout import simulate
from flowfill.layout.optimize import (Failure, Infeasible, Optimum, SearchRange,
                                      bisect, flow_fill, optimize_height)
from flowfill.main import set_config
from flowfill.Media import ColorBox
from flowfill.types import UndefinedAspectRatio


def test_bisect():
    search = SearchRange(lo=0, hi=100, tol=0.5, ok=lambda x: x < 42.3)
    best = bisect(search)
    assert 42.3 - 0.5 <= best < 42.3
    assert search.lo == best
    assert search.hi - search.lo <= 0.5
    assert not search.ok(search.hi)


def test_bisect_within_tolerance():
    calls = []

    def ok(x):
        calls.append(x)
        return True

    # lo is returned right away, because it is known to be ok
    assert bisect(SearchRange(lo=3, hi=3.5, tol=1, ok=ok)) == 3
    assert calls == []


def test_single_element():
    elem = ColorBox(16, 9)
    result = optimize_height([elem], 1000, 1000, 10)
    assert isinstance(result, Optimum)
    # 16/9 * h < 1000
    assert 562.5 - 1 <= result.height < 562.5
    layout = result.layout
    assert len(layout) == 1
    assert layout.rows[0].elements == [elem]
    assert layout.size == pytest.approx((16 * result.height / 9, result.height))


def test_three_elements():
    """
    Three 16x9 elements in a 300x300 box with a spacing of 10.

    In a single row they would only get 3 * 16h/9 + 20 < 300, so h < 52.5.
    Stacked in three rows the height bound is 3h + 20 < 300, so h < 280/3,
    while every row is only 16h/9 < 166 wide. The search finds the stacked layout.
    """
    elems = [ColorBox(16, 9) for _ in range(3)]
    result = optimize_height(elems, 300, 300, 10)
    assert isinstance(result, Optimum)
    best = 280 / 3
    assert best - 1 <= result.height < best
    assert result.height > 52.5
    assert [len(row) for row in result.layout] == [1, 1, 1]
    assert result.layout.fits(300, 300)
    assert not simulate(elems, result.height + 1, 300, 10).fits(300, 300)


def test_evaluations():
    rng = random.Random(1)
    for n in (1, 5, 50):
        elems = [ColorBox(rng.randint(1, 20), rng.randint(1, 20)) for _ in range(n)]
        result = optimize_height(elems, 800, 600, 5)
        assert isinstance(result, Optimum)
        assert result.evaluations == math.ceil(math.log2((100_000 - 1) / 1)) + 2 == 19


def test_evaluations_with_other_bounds():
    set_config(lo=1, hi=1000, tol=0.5)
    result = optimize_height([ColorBox(4, 3)], 800, 600, 5)
    assert isinstance(result, Optimum)
    assert result.evaluations == math.ceil(math.log2(999 / 0.5)) + 2


def test_fit():
    rng = random.Random(11)
    for _ in range(40):
        elems = [
            ColorBox(rng.randint(1, 30), rng.randint(1, 30))
            for _ in range(rng.randint(1, 25))
        ]
        # big enough that every element fits at a height of 1
        width, height = rng.uniform(200, 2000), rng.uniform(200, 2000)
        spacing = rng.uniform(0, 5)
        result = optimize_height(elems, width, height, spacing)
        assert isinstance(result, Optimum)
        assert result.layout.width < width
        assert result.layout.height < height
        assert result.layout.elt_height == result.height


def test_lower_bound_rejected(caplog):
    # even at a height of 1 this is 1778 wide
    elem = ColorBox(16000, 9)
    result = optimize_height([elem], 300, 300, 10)
    assert isinstance(result, Failure)
    assert result.reason is Infeasible.LOWER_BOUND_REJECTED
    assert result.evaluations == 1

    with caplog.at_level(logging.WARNING):
        layout = flow_fill([elem], 300, 300, 10)
    assert "bisecting failed" in caplog.text
    assert layout is not None
    assert layout.elt_height == 2
    assert [row.elements for row in layout] == [[elem]]


def test_upper_bound_accepted(caplog):
    elem = ColorBox(1, 1)
    result = optimize_height([elem], 1e6, 1e6, 0)
    assert isinstance(result, Failure)
    assert result.reason is Infeasible.UPPER_BOUND_ACCEPTED
    assert result.evaluations == 2
    assert "100000" in result.message

    set_config(fallback_height=7)
    with caplog.at_level(logging.WARNING):
        layout = flow_fill([elem], 1e6, 1e6, 0)
    assert layout is not None
    assert layout.size == (7, 7)


def test_flow_fill():
    assert flow_fill([], 100, 100, 10) is None
    elems = [ColorBox(4, 3), ColorBox(3, 4), ColorBox(1, 1)]
    layout = flow_fill(elems, 500, 200, 10)
    assert layout is not None
    assert layout.fits(500, 200)
    assert sorted(map(id, layout_elems(layout))) == sorted(map(id, elems))


def layout_elems(layout):
    return [cell.elem for cell in layout.cells]


def test_undefined_aspect_ratio_propagates():
    with pytest.raises(UndefinedAspectRatio):
        optimize_height([ColorBox(16, 9), ColorBox(5, 0)], 300, 300, 10)
    with pytest.raises(UndefinedAspectRatio):
        flow_fill([ColorBox(0, 0)], 300, 300, 10)


def test_adversarial_aspect_ratios():
    """
    A panorama, a very tall element and some others.
    The row count changes in steps when the height grows,
    so the bounding box is not a smooth function of the height.
    This documents that the feasible heights still were a prefix for this mix
    and that the search ends at its boundary.
    """
    elems = [
        ColorBox(20, 1),
        ColorBox(1, 20),
        ColorBox(1, 1),
        ColorBox(3, 1),
        ColorBox(1, 5),
        ColorBox(7, 2),
    ]
    width, height, spacing = 400, 300, 7

    def ok(h):
        return simulate(elems, h, width, spacing).fits(width, height)

    samples = [i / 4 for i in range(4, 4 * 40)]
    feasible = [ok(h) for h in samples]
    # observed: once infeasible, larger heights stay infeasible
    assert feasible == sorted(feasible, reverse=True)
    last_ok = max(h for h, f in zip(samples, feasible) if f)

    result = optimize_height(elems, width, height, spacing)
    assert isinstance(result, Optimum)
    assert last_ok - 1 < result.height < last_ok + 0.25
    # the panorama alone limits the height to 20
    assert result.height < 20
