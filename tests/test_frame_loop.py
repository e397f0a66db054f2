import pygame
import pytest

from conftest import FakeRenderer, ManualClock
from core.animation import AnimationMixer
from core.events import KeyEvent, MouseButtonEvent, MouseMotionEvent, MouseWheelEvent, ResizeEvent
from core.object3d import Group
from loaders.gltf_loader import GLTFResult
from ocean.oceanscene import OceanScene
from render.sky import Sky
from render.water import Water


def make_scene(renderer=None, loader=None, dt=1 / 60):
    return OceanScene(
        renderer or FakeRenderer(),
        loader=loader,
        clock=ManualClock(dt),
        width=800,
        height=600,
        load_assets=loader is not None,
    )


def test_water_time_counts_frames_not_seconds():
    scene = make_scene(dt=0.5)
    start = scene.water.time
    for _ in range(90):
        scene.frame()
    assert scene.water.time == pytest.approx(start + 90 * (1 / 60))
    assert scene.frame_count == 90


def test_frame_steps_run_in_order():
    log = []
    scene = make_scene(FakeRenderer(log))
    controller_update = scene.camera_controller.update
    mixers_update = scene.mixers.update
    water_advance = scene.water.advance
    poll = scene.placer.poll

    def record(name, fn):
        def wrapper(*args):
            log.append(name)
            return fn(*args)

        return wrapper

    scene.placer.poll = record("poll", poll)
    scene.camera_controller.update = record("move", controller_update)
    scene.mixers.update = record("mixers", mixers_update)
    scene.water.advance = record("water", water_advance)
    scene.input_queue.push(KeyEvent(pygame.K_w, True))
    scene.handle_event = record("input", scene.handle_event)

    scene.frame()
    assert log == ["poll", "input", "move", "mixers", "water", "render", "gui"]


def test_queued_input_applies_at_start_of_next_frame():
    scene = make_scene(dt=0.1)
    scene.input_queue.push(KeyEvent(pygame.K_w, True))
    assert not scene.camera_controller.movement.forward
    start = pygame.math.Vector3(scene.camera.position)
    scene.frame()
    assert scene.camera_controller.movement.forward
    assert (scene.camera.position - start).length() == pytest.approx(1.0)
    assert len(scene.input_queue) == 0


def test_mixers_share_one_delta():
    scene = make_scene(dt=0.25)
    a = scene.mixers.add(AnimationMixer(Group()))
    b = scene.mixers.add(AnimationMixer(Group()))
    scene.frame()
    scene.frame()
    assert a.time == pytest.approx(0.5)
    assert b.time == a.time


def test_resize_updates_camera_renderer_and_gui():
    renderer = FakeRenderer()
    scene = make_scene(renderer)
    scene.input_queue.push(ResizeEvent(1200, 400))
    scene.frame()
    assert scene.camera.aspect == pytest.approx(3.0)
    assert scene.camera.projection_matrix[0, 0] == pytest.approx(scene.camera.projection_matrix[1, 1] / 3.0)
    assert renderer.sizes == [(1200, 400)]
    assert scene.gui.viewport_width == 1200


def test_failed_and_pending_loads_do_not_block_frames(loader):
    scene = make_scene(loader=loader)
    static = [n for n in scene.children]
    assert len(loader.requests) == 5

    # submarine resolves, one island fails, birds never resolve
    (_, submarine), (_, island0), (_, island1), (_, island2), (_, birds) = loader.requests
    submarine.set_result(GLTFResult(scene=Group()))
    island0.set_exception(OSError("missing island3.obj"))
    island1.set_result(GLTFResult(scene=Group()))
    island2.set_result(GLTFResult(scene=Group()))

    for _ in range(3):
        scene.frame()

    loaded = [n for n in scene.children if n not in static]
    assert len(loaded) == 3
    assert {n.name for n in loaded} == {"submarine", "island_1", "island_2"}
    assert sum(isinstance(n, Water) for n in scene.children) == 1
    assert sum(isinstance(n, Sky) for n in scene.children) == 1
    assert len(scene.placer.failed) == 1
    assert scene.placer.pending == 1
    assert scene.frame_count == 3


def test_close_shuts_down_loader(loader):
    scene = make_scene(loader=loader)
    scene.close()
    assert loader.shut_down
    assert scene.loader is None


def test_release_over_panel_ends_orbit_drag():
    scene = make_scene()
    panel = (scene.gui.left + 5, 5)
    scene.input_queue.push(MouseButtonEvent((10, 300), 1, True))
    scene.input_queue.push(MouseMotionEvent(panel, (0, 0), (True, False, False)))
    scene.input_queue.push(MouseButtonEvent(panel, 1, False))
    scene.frame()
    start = pygame.math.Vector3(scene.camera.position)

    scene.input_queue.push(MouseMotionEvent((10, 300), (80, 0), (False, False, False)))
    scene.frame()
    assert scene.camera.position == start


def test_drag_outside_panel_orbits_camera():
    scene = make_scene()
    start = pygame.math.Vector3(scene.camera.position)
    scene.input_queue.push(MouseButtonEvent((10, 300), 1, True))
    scene.input_queue.push(MouseMotionEvent((90, 300), (80, 0), (True, False, False)))
    scene.frame()
    assert scene.camera.position != start


def test_wheel_over_panel_does_not_zoom():
    scene = make_scene()
    distance = scene.orbit.distance()
    scene.input_queue.push(MouseMotionEvent((scene.gui.left + 5, 5), (0, 0), (False, False, False)))
    scene.input_queue.push(MouseWheelEvent(1))
    scene.frame()
    assert scene.orbit.distance() == pytest.approx(distance)

    scene.input_queue.push(MouseMotionEvent((10, 300), (0, 0), (False, False, False)))
    scene.input_queue.push(MouseWheelEvent(1))
    scene.frame()
    assert scene.orbit.distance() < distance
