"""
The main file that loads media, layouts them and writes the result
"""

import asyncio
import logging
import os
from contextlib import redirect_stdout
from typing import Sequence, overload

import aiohttp
import jinja2

with open(os.devnull, "w") as f, redirect_stdout(f):
    import pygame as pg

import flowfill.config as config
import flowfill.utils as util

from .config import g
from .layout import Layout
from .layout.optimize import flow_fill
from .Media import Image, size_known, wait_for_size
from .render.html import render_page
from .render.surface import render_surface
from .types import Alignment, Color, ColorValue, VisualElement

config.jinja_env = jinja2.Environment(autoescape=True)


@overload
def set_config():
    ...


@overload
def set_config(
    *,
    lo: float | None = None,
    hi: float | None = None,
    tol: float | None = None,
    fallback_height: float | None = None,
    spacing: float | None = None,
    row_align: Alignment | None = None,
    bg_color: ColorValue | None = None,
    poll_interval: float | None = None,
    load_timeout: float | None = None,
):
    ...


def set_config(**kwargs):
    """
    Updates the global config. None values and unknown keys are ignored
    """
    g.update({k: v for k, v in kwargs.items() if k in g and v is not None})
    g["bg_color"] = Color(g["bg_color"])


async def _wait_ready(elem: VisualElement) -> bool:
    """
    Waits until the size of the element is known.
    Returns False for images that couldn't be loaded
    """
    if isinstance(elem, Image):
        if elem.is_unloaded:
            elem.init_load()
        if (task := elem.loading_task) is not None:
            await asyncio.wait([task])
        if not elem.is_loaded:
            return False
    await wait_for_size(elem)
    return True


async def alayout(
    elems: Sequence[VisualElement],
    width: float,
    height: float,
    spacing: float | None = None,
) -> Layout | None:
    """
    Waits for the sizes of all elements and then layouts them.
    Elements whose size doesn't arrive within g["load_timeout"] seconds are left out
    """
    spacing = util.make_default(spacing, g["spacing"])
    await util.gather_tasks(config.tasks)
    if not elems:
        return None
    waiters = [util.create_task(_wait_ready(elem)) for elem in elems]
    _, pending = await asyncio.wait(waiters, timeout=g["load_timeout"])
    for elem, waiter in zip(elems, waiters):
        if waiter in pending:
            waiter.cancel()
            logging.warning(f"Gave up waiting for the size of {elem!r}")
        elif not waiter.result():
            logging.warning(f"Leaving out {elem!r}")
    ready = [elem for elem in elems if size_known(elem)]
    return flow_fill(ready, width, height, spacing)


async def write_layout(
    layout: Layout | None,
    out: str,
    width: float,
    height: float,
):
    """
    Writes the layout as html if out ends with .html, else as an image
    """
    if os.path.splitext(out)[1].lower() in (".html", ".htm"):
        html = render_page(layout, width, height, title=os.path.basename(out))
        await util.File(out).awrite(html)
    else:
        surf = render_surface(layout, width, height)
        await asyncio.to_thread(pg.image.save, surf, out)
    logging.info(f"Wrote: {out}")


async def arun(
    srcs: Sequence[str],
    out: str,
    width: float,
    height: float,
    spacing: float | None = None,
) -> Layout | None:
    """
    Loads the images, layouts them and writes the result to out

    ```py
    await arun(["a.png", "b.jpg"], "out.png", 900, 600)
    ```
    """
    logging.info("Starting")
    # XXX: these need to be here because they require a running event loop
    config.event_loop = asyncio.get_running_loop()
    config.aiosession = aiohttp.ClientSession()
    try:
        elems = [Image(src) for src in srcs]
        layout = await alayout(elems, width, height, spacing)
        await write_layout(layout, out, width, height)
        return layout
    finally:
        logging.info("Exiting")
        await config.aiosession.close()
        for task in config.tasks:
            task.cancel()
        await asyncio.gather(*config.tasks, return_exceptions=True)
        config.tasks.clear()
        await util.delete_created_files()
        config.event_loop = None


def run(
    srcs: Sequence[str],
    out: str,
    width: float,
    height: float,
    spacing: float | None = None,
) -> Layout | None:
    """
    Runs arun synchronously

    ```py
    run(["a.png", "b.jpg"], "out.png", 900, 600)
    ```
    """
    return asyncio.run(arun(srcs, out, width, height, spacing))
