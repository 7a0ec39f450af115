import pygame as pg
import pytest

import flowfill.config as config
from flowfill.config import g


@pytest.fixture(autouse=True)
def restore_config():
    """
    Tests are allowed to change the global config
    """
    saved = dict(g)
    yield
    g.clear()
    g.update(saved)
    config.tasks.clear()


@pytest.fixture
def make_png(tmp_path):
    """
    Saves a png of the given size and color and returns its path
    """

    def make(name: str, size: tuple[int, int], color="red") -> str:
        surf = pg.Surface(size)
        surf.fill(color)
        path = tmp_path / name
        pg.image.save(surf, str(path))
        return str(path)

    return make
