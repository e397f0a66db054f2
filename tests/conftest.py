import os
import sys
from concurrent.futures import Future
from pathlib import Path

import pytest

# headless pygame; the scene logic never needs a window
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FakeRenderer:
    """Records calls instead of drawing."""

    def __init__(self, log=None):
        self.log = log if log is not None else []
        self.sizes = []

    def render(self, scene, camera):
        self.log.append("render")

    def draw_gui(self, gui):
        self.log.append("gui")

    def set_size(self, width, height):
        self.sizes.append((width, height))


class ManualClock:
    """FrameClock stand-in returning scripted deltas."""

    def __init__(self, dt=0.0):
        self.dt = dt
        self.elapsed_time = 0.0

    def get_delta(self):
        self.elapsed_time += self.dt
        return self.dt


class FakeLoader:
    """AssetLoader stand-in handing out futures the test resolves by hand."""

    def __init__(self):
        self.requests = []
        self.shut_down = False

    def _future(self, *args):
        future = Future()
        self.requests.append((args, future))
        return future

    def load_gltf(self, path):
        return self._future("gltf", path)

    def load_obj(self, obj_path, mtl_path=None):
        return self._future("obj", obj_path, mtl_path)

    def shutdown(self, cancel_futures=True):
        self.shut_down = True


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def loader():
    return FakeLoader()
