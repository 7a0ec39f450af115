"""
This is the flow layout for visual elements

All elements are scaled to one common height (the element height).
Their widths follow from their intrinsic aspect ratios.
Then they are put into rows, just like words are wrapped into lines of text.

After packing, the rows are sorted from narrowest to widest,
so that centered rows form a pyramid instead of an arbitrary stack.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence

from flowfill.types import (Surface, UndefinedAspectRatio, UnsupportedElement,
                            VisualElement)


def intrinsic_size(elem: VisualElement) -> tuple[float, float]:
    """
    The intrinsic (natural) size of the element.
    Raises an UnsupportedElement if the element can't tell,
    and an UndefinedAspectRatio if the size can't be used for scaling
    """
    if not isinstance(elem, VisualElement):
        raise UnsupportedElement(elem)
    width, height = elem.intrinsic_width(), elem.intrinsic_height()
    # also catches NaN
    if not (width > 0 and height > 0) or math.isinf(width) or math.isinf(height):
        raise UndefinedAspectRatio(elem, width, height)
    return width, height


def scaled_width(elem: VisualElement, elt_height: float) -> float:
    """
    The width of the element when scaled to elt_height, preserving the aspect ratio
    """
    width, height = intrinsic_size(elem)
    return elt_height * width / height


@dataclass(frozen=True, slots=True)
class Cell:
    """
    A single element together with the size it is layouted at
    """

    elem: VisualElement
    width: float
    height: float

    def render(self) -> Surface:
        return self.elem.render(self.width, self.height)


@dataclass(frozen=True, slots=True)
class Row:
    """
    A row of cells. The cells keep the order they had in the input
    """

    cells: tuple[Cell, ...]
    spacing: float

    @property
    def width(self) -> float:
        return sum(cell.width for cell in self.cells) + self.spacing * (
            len(self.cells) - 1
        )

    @property
    def height(self) -> float:
        return max((cell.height for cell in self.cells), default=0)

    @property
    def elements(self) -> list[VisualElement]:
        return [cell.elem for cell in self.cells]

    @property
    def widths(self) -> list[float]:
        return [cell.width for cell in self.cells]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self):
        return len(self.cells)


@dataclass(frozen=True, slots=True)
class Layout:
    """
    The result of laying out a list of elements at one element height.

    width and height give the size of the bounding box of all rows
    """

    rows: tuple[Row, ...]
    width: float
    height: float
    elt_height: float
    spacing: float

    @property
    def size(self) -> tuple[float, float]:
        return self.width, self.height

    def fits(self, max_width: float, max_height: float) -> bool:
        """
        Whether the layout fits strictly inside a box of the given size
        """
        return self.width < max_width and self.height < max_height

    @property
    def cells(self) -> list[Cell]:
        return [cell for row in self.rows for cell in row]

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __len__(self):
        return len(self.rows)


def simulate(
    elems: Sequence[VisualElement],
    elt_height: float,
    max_width: float,
    spacing: float,
) -> Layout:
    """
    Simulates laying out the elements in a box of width max_width,
    given that all elements are scaled to elt_height and spaced by spacing.

    An element that is wider than max_width on its own still gets its own row.
    The resulting layout is then simply wider than max_width.
    """
    if not elems:
        return Layout((), 0, 0, elt_height, spacing)

    rows: list[list[Cell]] = []
    first, *rest = elems
    row = [Cell(first, scaled_width(first, elt_height), elt_height)]
    x1 = row[0].width
    for elem in rest:
        width = scaled_width(elem, elt_height)
        if x1 + spacing + width < max_width:
            # put the element right of its sibling
            x1 += spacing + width
        else:
            # reflow to the next row
            rows.append(row)
            row = []
            x1 = width
        row.append(Cell(elem, width, elt_height))
    rows.append(row)

    # narrowest at the top, widest at the bottom. sorted is stable
    sorted_rows = sorted(
        (Row(tuple(cells), spacing) for cells in rows), key=lambda row: row.width
    )
    n = len(sorted_rows)
    return Layout(
        rows=tuple(sorted_rows),
        width=max(row.width for row in sorted_rows),
        height=elt_height * n + spacing * (n - 1),
        elt_height=elt_height,
        spacing=spacing,
    )


__all__ = [
    "Cell",
    "Row",
    "Layout",
    "simulate",
    "scaled_width",
    "intrinsic_size",
]
