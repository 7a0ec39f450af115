"""
Pygame related utilities
"""

from contextlib import contextmanager

import numpy as np
import pygame as pg

from flowfill.types import Color, ColorValue, Coordinate, Rect, Surface


def int_size(size: Coordinate) -> tuple[int, int]:
    """
    Round a float size to the pixel size pygame wants
    """
    w, h = size
    return max(0, round(w)), max(0, round(h))


def scale_surf(surf: Surface, size: Coordinate) -> Surface:
    """
    Scales the surface to the given size.
    smoothscale only works on 24 and 32 bit surfaces, so anything else is scaled roughly
    """
    size = int_size(size)
    if surf.get_size() == size:
        return surf.copy()
    if surf.get_bitsize() in (24, 32):
        return pg.transform.smoothscale(surf, size)
    return pg.transform.scale(surf, size)


def get_rect(size: Coordinate, color: ColorValue) -> Surface:
    """
    A surface of the given size filled with the color (handles transparent colors)
    """
    color = Color(color)
    drawn_rect = Surface(int_size(size))
    drawn_rect.fill(color)
    if color.a != 255:
        drawn_rect.set_alpha(color.a)
    return drawn_rect


def frame_to_surf(frame: np.ndarray) -> Surface:
    """
    Converts a video frame with the shape (height, width, 3) to a surface.
    Pygames surfarray is indexed [x][y], so the axes need to be swapped
    """
    if frame.ndim != 3 or frame.shape[2] != 3:
        raise ValueError(f"Expected a frame of shape (height, width, 3), got {frame.shape}")
    return pg.surfarray.make_surface(np.ascontiguousarray(frame.swapaxes(0, 1)))


@contextmanager
def surf_clip(surf: Surface, clip: Rect):
    """
    Sets the surfaces clip in a context manager.
    """
    original_clip = surf.get_clip()
    surf.set_clip(clip)
    try:
        yield
    finally:
        surf.set_clip(original_clip)
