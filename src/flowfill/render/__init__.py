"""
Turning a Layout into something visible.

place gives every cell its absolute position inside the box.
The actual renderers live in the submodules html and surface.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowfill.config import g
from flowfill.layout import Cell, Layout
from flowfill.layout.align import align_by
from flowfill.types import Alignment, Rect
from flowfill.utils import make_default


@dataclass(frozen=True, slots=True)
class Placement:
    """
    Where a cell goes, relative to the top left of the box
    """

    cell: Cell
    x: float
    y: float

    @property
    def width(self):
        return self.cell.width

    @property
    def height(self):
        return self.cell.height

    @property
    def rect(self) -> Rect:
        """The placement rounded to pixels"""
        return Rect(round(self.x), round(self.y), round(self.width), round(self.height))


def place(
    layout: Layout,
    width: float,
    height: float,
    alignment: Alignment | None = None,
) -> list[Placement]:
    """
    Places the layout in a box of the given size.
    The rows are centered vertically as a block and every row is aligned horizontally
    """
    alignment = make_default(alignment, g["row_align"])
    y = (height - layout.height) / 2
    placements: list[Placement] = []
    for row in layout.rows:
        xs = align_by(alignment, width, row.widths, layout.spacing)
        placements.extend(Placement(cell, x, y) for x, cell in zip(xs, row))
        y += row.height + layout.spacing
    return placements


__all__ = ["Placement", "place"]
