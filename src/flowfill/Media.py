"""
This file includes Media classes like Image, Video or ColorBox

All of them are VisualElements, so they can be layouted with flow_fill.
"""

import asyncio
import inspect
import logging
from typing import AsyncIterable, Callable, Iterable
from weakref import WeakValueDictionary

import numpy as np
import pygame as pg
from markupsafe import Markup

import flowfill.config as config
import flowfill.utils as util
from flowfill.config import g
from flowfill.types import Color, ColorValue, Surface, UnsupportedElement, VisualElement

surf_cache = WeakValueDictionary[str, Surface]()


async def load_surf(url: str):
    """
    Loads a surf. To save RAM surfs are cached in a surf_cache
    """
    if (surf := surf_cache.get(url)) is None:
        file = await util.download(url)
        surf_cache[url] = surf = await asyncio.to_thread(pg.image.load, file)
    return surf


def _html(template: str, **kwargs) -> Markup:
    return Markup(config.jinja_env.from_string(template).render(**kwargs))


def box_html(width: float, height: float) -> Markup:
    """
    An empty box of the given size
    """
    return _html(
        '<div style="width: {{ width }}px; height: {{ height }}px;"></div>',
        width=width,
        height=height,
    )


class Media:
    """
    The base for all media.
    A media knows its intrinsic size and can render itself at any size
    """

    def intrinsic_width(self) -> float:
        raise NotImplementedError

    def intrinsic_height(self) -> float:
        raise NotImplementedError

    def render(self, width: float, height: float) -> Surface:
        raise NotImplementedError

    @property
    def has_size(self) -> bool:
        """Whether both intrinsic dimensions are known"""
        return size_known(self)

    def html(self, width: float, height: float) -> Markup:
        return box_html(width, height)


# to avoid None checks
_default_surf = Surface((0, 0))


class Image(Media):
    """
    Represents a single image with multiple sources
    """

    _surf: Surface
    _loading_task: util.Task | None

    def __init__(
        self,
        urls: list[str] | str,
        load: bool = True,
        sync: bool = False,
    ):
        """
        Initialize the image from the urls
        sync specifies that the image should be loaded before anything gets layouted
        load specifies that the image should be loaded right away
        """
        self.urls = urls if isinstance(urls, list) else [urls]
        self.url = self.urls[0] if self.urls else ""
        self.surf = _default_surf
        self._loading_task = None
        if load or sync:
            self.init_load()
            self.loading_task.sync = sync

    @classmethod
    def from_surface(cls, surf: Surface, url: str = ""):
        """
        An image that is already loaded
        """
        image = cls([url] if url else [], load=False)
        image.surf = surf
        return image

    @property
    def surf(self):
        """
        Getting the images surf automatically starts loading it if it isn't loaded
        """
        if self._surf is _default_surf and self.urls:
            self.init_load()
        return self._surf

    @surf.setter
    def surf(self, surf: Surface):
        self._surf = surf

    @property
    def loading_task(self) -> util.Task | None:
        return self._loading_task

    async def load_urls(self):
        """
        Continuously try loading images. If all fail returns None
        """
        for url in self.urls:
            self.url = url
            try:
                self.surf = await load_surf(url)
                logging.debug(f"Loaded Image: {url!r}")
                return self.surf
            except asyncio.CancelledError:
                logging.debug(f"Cancelled loading image: {url!r}")
                raise
            except Exception as e:
                util.log_error_once(f"Couldn't load image: {url!r}. Reason: {e}")

    def init_load(self):
        """
        Initialize loading the image
        """
        if not self.is_loading:
            self._loading_task = util.create_task(
                self.load_urls(), callback=self._on_loaded
            )

    def unload(self):
        """
        Unloads the image by destroying
        the loaded surface and the current loading task
        """
        self.surf = _default_surf
        if self._loading_task is not None:
            self._loading_task.cancel()

    def _on_loaded(self, future: asyncio.Future[Surface]):
        """
        The default on_loaded callback.
        If you want to add your own callback do:
        ```python
        if image.is_loading:
            image.loading_task.add_done_callback(your_callback)
        ```
        """
        if future.cancelled():
            return
        if (exception := future.exception()) is not None:
            util.log_error_once(
                f"Couldn't load image with urls: {self.urls} and exception {type(exception)}: {exception}"
            )
        elif future.result() is None:
            logging.warning(f"None of the image urls could be loaded: {self.urls}")

    def intrinsic_width(self) -> float:
        return self._surf.get_width()

    def intrinsic_height(self) -> float:
        return self._surf.get_height()

    def render(self, width: float, height: float) -> Surface:
        """
        The image scaled to the given size.
        If the surf is unloaded, loading will automatically start
        """
        return util.scale_surf(self.surf, (width, height))

    def html(self, width: float, height: float) -> Markup:
        return _html(
            '<img src="{{ url }}" style="width: {{ width }}px; height: {{ height }}px;">',
            url=self.url,
            width=width,
            height=height,
        )

    @property
    def is_loading(self):
        """Whether the images surf is being loaded currently"""
        return self._loading_task is not None and not self._loading_task.done()

    @property
    def is_loaded(self):
        """Whether the images surf is loaded and ready to draw"""
        return self._surf is not _default_surf

    @property
    def is_unloaded(self):
        """Whether the images surf is unloaded (neither loading nor loaded)"""
        return not (self.is_loaded or self.is_loading)

    def __repr__(self):
        return f"Image({self.url!r})"


Frame = np.ndarray
""" A video frame with the shape (height, width, 3) """


class Video(Media):
    """
    A video that is fed with decoded frames.

    Just like a streamed html video, it doesn't know its size
    until the first frame has arrived.
    """

    frame: Frame | None = None
    is_playing: bool = False

    def __init__(self, url: str | None = None):
        self.url = url

    @property
    def video_width(self) -> int:
        return 0 if self.frame is None else self.frame.shape[1]

    @property
    def video_height(self) -> int:
        return 0 if self.frame is None else self.frame.shape[0]

    def push_frame(self, frame: Frame):
        """
        Sets the current frame
        """
        frame = np.asarray(frame)
        if frame.ndim != 3 or frame.shape[2] != 3:
            raise ValueError(
                f"Expected a frame of shape (height, width, 3), got {frame.shape}"
            )
        self.frame = frame

    async def play(
        self, frames: Iterable[Frame] | AsyncIterable[Frame], fps: float | None = None
    ):
        """
        Consumes the frames, showing every frame for 1/fps seconds
        """
        delay = 0 if not fps else 1 / fps
        self.is_playing = True
        try:
            if isinstance(frames, AsyncIterable):
                async for frame in frames:
                    self.push_frame(frame)
                    await asyncio.sleep(delay)
            else:
                for frame in frames:
                    self.push_frame(frame)
                    await asyncio.sleep(delay)
        finally:
            self.is_playing = False

    def intrinsic_width(self) -> float:
        return self.video_width

    def intrinsic_height(self) -> float:
        return self.video_height

    def render(self, width: float, height: float) -> Surface:
        if self.frame is None:
            return util.get_rect((width, height), "black")
        return util.scale_surf(util.frame_to_surf(self.frame), (width, height))

    def html(self, width: float, height: float) -> Markup:
        if self.url is None:
            return super().html(width, height)
        return _html(
            '<video src="{{ url }}" style="width: {{ width }}px; height: {{ height }}px;" autoplay muted loop></video>',
            url=self.url,
            width=width,
            height=height,
        )

    def __repr__(self):
        return f"Video({self.url!r})"


class ColorBox(Media):
    """
    A solid block of color with a fixed intrinsic size
    """

    def __init__(self, width: float, height: float, color: ColorValue = "gray"):
        self.width = width
        self.height = height
        self.color = Color(color)

    def intrinsic_width(self) -> float:
        return self.width

    def intrinsic_height(self) -> float:
        return self.height

    def render(self, width: float, height: float) -> Surface:
        return util.get_rect((width, height), self.color)

    def html(self, width: float, height: float) -> Markup:
        r, g_, b, a = self.color
        return _html(
            '<div style="width: {{ width }}px; height: {{ height }}px; background-color: rgba({{ rgba }});"></div>',
            width=width,
            height=height,
            rgba=f"{r}, {g_}, {b}, {a / 255:.3g}",
        )

    def __repr__(self):
        return f"ColorBox({self.width}, {self.height})"


############################## Size polling ##############################


def size_known(elem: VisualElement) -> bool:
    """
    Whether the element knows its intrinsic size (both dimensions are non-zero)
    """
    if not isinstance(elem, VisualElement):
        raise UnsupportedElement(elem)
    return bool(elem.intrinsic_width() and elem.intrinsic_height())


async def wait_for_size(
    elem: VisualElement, interval: float | None = None
) -> tuple[float, float]:
    """
    Checks the element every interval seconds until its intrinsic size is known.
    Returns the intrinsic size
    """
    interval = util.make_default(interval, g["poll_interval"])
    while not size_known(elem):
        await asyncio.sleep(interval)
    return elem.intrinsic_width(), elem.intrinsic_height()


def poll_size(
    elem: VisualElement,
    callback: Callable,
    interval: float | None = None,
) -> util.Task:
    """
    Repeatedly checks the element for a valid width and height.
    Once those are set, it calls callback(width, height) exactly once.

    Cancel the returned task to stop polling.
    """

    async def _poll():
        width, height = await wait_for_size(elem, interval)
        rv = callback(width, height)
        if inspect.isawaitable(rv):
            await rv

    return util.create_task(_poll())


__all__ = [
    "Media",
    "Image",
    "Video",
    "ColorBox",
    "Frame",
    "size_known",
    "wait_for_size",
    "poll_size",
]
