"""
Row align

Gives the x offsets of the items of a row. Supports:

left, right, center, justify

"""

from typing import Iterable, Protocol

from flowfill.types import Alignment


class RowAlign(Protocol):
    def __call__(
        self, max_width: float, widths: list[float], spacing: float = 0
    ) -> list[float]:
        """
        Aligns a row
        """


def space_left(max_width, widths, spacing=0):
    return max_width - sum(widths) - spacing * max(0, len(widths) - 1)


def _left(widths: Iterable[float], spacing: float):
    acc = 0
    for w in widths:
        yield acc
        acc = acc + w + spacing


def left(max_width, widths, spacing=0):
    return [*_left(widths, spacing)]


def right(max_width, widths, spacing=0):
    rem = space_left(max_width, widths, spacing)
    return [x + rem for x in _left(widths, spacing)]


def center(max_width, widths, spacing=0):
    rem = space_left(max_width, widths, spacing) / 2
    return [x + rem for x in _left(widths, spacing)]


def justify(max_width, widths, spacing=0):
    l = [*_left(widths, spacing)]
    if len(l) < 2:
        return l
    rem = space_left(max_width, widths, spacing) / (len(l) - 1)
    return [x + rem * i for i, x in enumerate(l)]


aligners: dict[str, RowAlign] = {
    "left": left,
    "right": right,
    "center": center,
    "justify": justify,
}


def align_by(
    alignment: Alignment, max_width: float, widths: list[float], spacing: float = 0
) -> list[float]:
    try:
        aligner = aligners[alignment]
    except KeyError:
        raise ValueError(f"Unknown alignment: {alignment!r}") from None
    return aligner(max_width, widths, spacing)
