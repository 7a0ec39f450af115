import asyncio
import base64

import numpy as np
import pygame as pg
import pytest

import flowfill.utils.aio as aio
from flowfill.Media import ColorBox, Image, Video, poll_size, size_known, wait_for_size
from flowfill.types import UnsupportedElement, VisualElement
from flowfill.utils import frame_to_surf


def frame(width: int, height: int, color=(255, 0, 0)):
    f = np.zeros((height, width, 3), np.uint8)
    f[:, :] = color
    return f


def test_color_box():
    box = ColorBox(16, 9, "green")
    assert isinstance(box, VisualElement)
    assert (box.intrinsic_width(), box.intrinsic_height()) == (16, 9)
    assert box.has_size
    surf = box.render(32.4, 18.2)
    assert surf.get_size() == (32, 18)
    assert surf.get_at((0, 0)) == pg.Color("green")


def test_video():
    video = Video("clip.mp4")
    assert (video.video_width, video.video_height) == (0, 0)
    assert not video.has_size
    assert video.render(4, 3).get_size() == (4, 3)

    video.push_frame(frame(16, 9))
    assert (video.intrinsic_width(), video.intrinsic_height()) == (16, 9)
    surf = video.render(32, 18)
    assert surf.get_size() == (32, 18)
    assert surf.get_at((10, 10)) == pg.Color("red")
    assert 'src="clip.mp4"' in video.html(32, 18)

    with pytest.raises(ValueError):
        video.push_frame(np.zeros((9, 16), np.uint8))


def test_frame_to_surf():
    f = frame(3, 2, (0, 0, 0))
    f[0, 1] = (0, 0, 255)
    surf = frame_to_surf(f)
    assert surf.get_size() == (3, 2)
    assert surf.get_at((1, 0)) == pg.Color("blue")
    assert surf.get_at((0, 1)) == pg.Color("black")


def test_size_known():
    assert size_known(ColorBox(1, 1))
    assert not size_known(ColorBox(0, 1))
    with pytest.raises(UnsupportedElement):
        size_known("img")  # type: ignore


async def test_image_from_file(make_png):
    image = Image(make_png("red.png", (16, 9)))
    assert image.is_loading
    assert await image.loading_task is image.surf
    assert image.is_loaded
    assert (image.intrinsic_width(), image.intrinsic_height()) == (16, 9)
    assert image.render(32, 18).get_size() == (32, 18)
    assert await wait_for_size(image) == (16, 9)


async def test_image_fallback_urls(make_png, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    good = make_png("good.png", (4, 3))
    image = Image([str(tmp_path / "missing.png"), good])
    await image.loading_task
    assert image.url == good
    assert image.is_loaded
    assert (tmp_path / "error.log").exists()


async def test_image_not_found(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    image = Image(str(tmp_path / "nothing.png"))
    assert await image.loading_task is None
    assert not image.is_loaded
    assert image.is_unloaded
    assert not image.has_size


async def test_image_data_url(make_png, tmp_path, monkeypatch):
    monkeypatch.setattr(aio, "save_dir", str(tmp_path))
    with open(make_png("blue.png", (5, 7), "blue"), "rb") as f:
        data = base64.b64encode(f.read()).decode("ascii")
    image = Image(f"data:image/png;base64,{data}")
    await image.loading_task
    assert (image.intrinsic_width(), image.intrinsic_height()) == (5, 7)
    await aio.delete_created_files()


async def test_image_unload(make_png):
    image = Image(make_png("red.png", (16, 9)))
    task = image.loading_task
    image.unload()
    await asyncio.wait([task])
    assert task.cancelled()
    assert image.is_unloaded


async def test_poll_size():
    video = Video()
    calls = []
    task = poll_size(video, lambda w, h: calls.append((w, h)), interval=0.01)
    player = asyncio.create_task(video.play([frame(16, 9)] * 3, fps=100))
    await task
    await player
    assert calls == [(16, 9)]

    # the callback is only called once
    video.push_frame(frame(8, 8))
    await asyncio.sleep(0.05)
    assert calls == [(16, 9)]


async def test_poll_size_known_and_async_callback():
    calls = []

    async def callback(w, h):
        calls.append((w, h))

    await poll_size(ColorBox(4, 3), callback)
    assert calls == [(4, 3)]


async def test_poll_size_cancel():
    video = Video()
    calls = []
    task = poll_size(video, lambda w, h: calls.append((w, h)), interval=0.01)
    await asyncio.sleep(0.03)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    video.push_frame(frame(16, 9))
    await asyncio.sleep(0.03)
    assert calls == []


async def test_poll_size_passes_width_and_height():
    sizes = []
    await poll_size(ColorBox(4, 3), lambda *size: sizes.append(size))
    assert sizes == [(4, 3)]

    # the callback always gets both dimensions
    with pytest.raises(TypeError):
        await poll_size(ColorBox(4, 3), lambda width: sizes.append(width))
    assert sizes == [(4, 3)]
