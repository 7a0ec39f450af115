"""
Renders a Layout to html with jinja.

The rows are flex boxes and spacing is done with invisible spacer divs,
so the browser does the actual positioning.
"""

from __future__ import annotations

from markupsafe import Markup

import flowfill.config as config
from flowfill.config import g
from flowfill.layout import Cell, Layout
from flowfill.Media import box_html
from flowfill.types import Alignment, Color, ColorValue
from flowfill.utils import intersperse, make_default


def _render(template: str, **kwargs) -> Markup:
    return Markup(config.jinja_env.from_string(template).render(**kwargs))


def spacer_html(spacing: float) -> Markup:
    return _render(config.spacer_template, size=spacing)


def cell_html(cell: Cell) -> Markup:
    """
    Asks the element for its html. Elements that can't do that become an empty box
    """
    if (html := getattr(cell.elem, "html", None)) is not None:
        return html(cell.width, cell.height)
    return box_html(cell.width, cell.height)


def render_html(layout: Layout | None, alignment: Alignment | None = None) -> Markup:
    """
    Renders the layout into a div that fills its parent
    """
    if layout is None:
        return Markup("")
    alignment = make_default(alignment, g["row_align"])
    try:
        justify = config.justify_content[alignment]
    except KeyError:
        raise ValueError(f"Unknown alignment: {alignment!r}") from None
    spacer = spacer_html(layout.spacing)
    rows = [
        _render(
            config.row_template,
            justify=justify,
            items=intersperse(map(cell_html, row), spacer),
        )
        for row in layout
    ]
    return _render(config.layout_template, rows=intersperse(rows, spacer))


def render_page(
    layout: Layout | None,
    width: float,
    height: float,
    title: str = "flowfill",
    bg_color: ColorValue | None = None,
    alignment: Alignment | None = None,
) -> str:
    """
    A complete html document showing the layout in a box of the given size
    """
    r, g_, b, _ = Color(make_default(bg_color, g["bg_color"]))
    return config.jinja_env.from_string(config.page_template).render(
        title=title,
        width=width,
        height=height,
        bg_color=f"rgb({r}, {g_}, {b})",
        content=render_html(layout, alignment),
    )


__all__ = ["render_html", "render_page", "cell_html", "spacer_html"]
