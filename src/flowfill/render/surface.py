"""
Renders a Layout with pygame by blitting every rendered cell to its placement
"""

from __future__ import annotations

from flowfill.config import g
from flowfill.layout import Layout
from flowfill.render import place
from flowfill.types import Alignment, Color, ColorValue, Rect, Surface
from flowfill.utils import int_size, make_default, surf_clip


def draw_layout(
    surf: Surface,
    layout: Layout,
    rect: Rect | None = None,
    alignment: Alignment | None = None,
):
    """
    Draws the layout into the rect of the surface (the whole surface by default).
    Nothing is drawn outside the rect
    """
    rect = Rect(rect) if rect is not None else Rect(surf.get_rect())
    with surf_clip(surf, rect):
        for placement in place(layout, rect.width, rect.height, alignment):
            surf.blit(placement.cell.render(), placement.rect.move(rect.topleft))


def render_surface(
    layout: Layout | None,
    width: float,
    height: float,
    bg_color: ColorValue | None = None,
    alignment: Alignment | None = None,
) -> Surface:
    """
    A new surface of the given size showing the layout
    """
    surf = Surface(int_size((width, height)))
    surf.fill(Color(make_default(bg_color, g["bg_color"])))
    if layout is not None:
        draw_layout(surf, layout, alignment=alignment)
    return surf


__all__ = ["draw_layout", "render_surface"]
