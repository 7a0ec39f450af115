from flowfill.main import alayout, arun, run, set_config

from .layout import Cell, Layout, Row, simulate
from .layout.optimize import (Failure, Infeasible, Optimum, SearchRange, bisect,
                              flow_fill, optimize_height)
from .Media import ColorBox, Image, Video, poll_size, wait_for_size
from .render import Placement, place
from .render.html import render_html, render_page
from .render.surface import draw_layout, render_surface
from .types import (LayoutError, UndefinedAspectRatio, UnsupportedElement,
                    VisualElement)

__all__ = [
    # layout
    "flow_fill",
    "simulate",
    "optimize_height",
    "bisect",
    "SearchRange",
    "Layout",
    "Row",
    "Cell",
    "Optimum",
    "Failure",
    "Infeasible",
    # errors
    "LayoutError",
    "UndefinedAspectRatio",
    "UnsupportedElement",
    # media
    "VisualElement",
    "Image",
    "Video",
    "ColorBox",
    "poll_size",
    "wait_for_size",
    # rendering
    "Placement",
    "place",
    "render_html",
    "render_page",
    "draw_layout",
    "render_surface",
    # run
    "set_config",
    "alayout",
    "arun",
    "run",
]
