"""
A single source of truth for types that are used in the other modules.
Instead of importing Rects, Colors or Surfaces from pygame, import them from here.
"""
from __future__ import annotations

from enum import Enum as _Enum

# fmt: off
from typing import Literal, Protocol, TypeVar, Union, runtime_checkable
# fmt: on

import pygame as pg
from pygame.rect import Rect
from pygame.surface import Surface


class BugError(AssertionError):
    """A type of error that should never occur. If it occurs, something needs to be fixed. Please report any BugErrors found."""


class LayoutError(ValueError):
    """
    Base class for elements the layout can't work with
    """

    def __init__(self, elem, msg: str):
        super().__init__(msg)
        self.elem = elem


class UndefinedAspectRatio(LayoutError):
    """
    The element reports an intrinsic width or height that is not positive,
    so its aspect ratio (and therefore its scaled width) is undefined
    """

    def __init__(self, elem, width: float, height: float):
        super().__init__(
            elem, f"Undefined aspect ratio for {elem!r}: intrinsic size {width}x{height}"
        )
        self.width = width
        self.height = height


class UnsupportedElement(LayoutError):
    """
    The element can't report an intrinsic size at all
    """

    def __init__(self, elem):
        super().__init__(elem, f"Unsupported element: {type(elem).__name__}")


# Aliases
##########################################################################

# a size, vector, or position
Coordinate = Union[tuple[float, float], pg.math.Vector2]

V_T = TypeVar("V_T")

ColorValue = Union[pg.Color, str, tuple[int, int, int], tuple[int, int, int, int]]
Alignment = Literal["left", "right", "center", "justify"]


############################ Some Classes ##############################
@runtime_checkable
class VisualElement(Protocol):
    """
    Anything that can be layouted by flow_fill.

    It needs to know its intrinsic (natural) size and has to be able to render itself at any size.
    """

    def intrinsic_width(self) -> float:
        ...

    def intrinsic_height(self) -> float:
        ...

    def render(self, width: float, height: float) -> Surface:
        ...


class Enum(_Enum):
    def __repr__(self):
        return f"{self.__class__.__name__}.{self.name}"


class Color(pg.Color):
    def __hash__(self):
        return hash(int(self))

    def __repr__(self):
        return f"Color{super().__repr__()}"


OpenModeReading = Literal["r", "rt", "rb"]
OpenModeWriting = Literal["w", "wt", "wb", "a", "ab", "x", "xb"]
OpenMode = Union[OpenModeReading, OpenModeWriting]

__all__ = [
    "BugError",
    "LayoutError",
    "UndefinedAspectRatio",
    "UnsupportedElement",
    "Coordinate",
    "V_T",
    "ColorValue",
    "Alignment",
    "VisualElement",
    "Enum",
    "Rect",
    "Color",
    "Surface",
    "OpenMode",
    "OpenModeReading",
    "OpenModeWriting",
]
