import numpy as np
import pytest
from pygame.math import Vector3

from conftest import ManualClock
from ocean.oceanscene import OceanScene
from ocean.sun import sun_direction
from render.environment import EnvironmentBaker, equirect_directions
from render.sky import Sky, aces_filmic


def sky_with_sun(elevation, azimuth=180.0):
    sky = Sky()
    sky.uniforms["sunPosition"] = sun_direction(elevation, azimuth)
    return sky


def test_equirect_directions_are_unit_and_top_row_points_up():
    dirs = equirect_directions(16, 8)
    assert dirs.shape == (8, 16, 3)
    assert np.linalg.norm(dirs, axis=-1) == pytest.approx(np.ones((8, 16)))
    assert dirs[0, :, 1].min() > 0.9
    assert dirs[-1, :, 1].max() < -0.9


def test_bake_shape_and_range():
    env = EnvironmentBaker(32, 16, blur_passes=1).from_sky(sky_with_sun(2.0))
    assert env.image.shape == (16, 32, 3)
    assert env.image.min() >= 0.0 and env.image.max() <= 1.0
    assert all(0.0 <= c <= 1.0 for c in env.irradiance)


def test_noon_is_brighter_than_night():
    baker = EnvironmentBaker(32, 16)
    noon = baker.from_sky(sky_with_sun(90.0))
    night = baker.from_sky(sky_with_sun(-30.0))
    assert sum(noon.irradiance) > sum(night.irradiance)
    assert baker.bake_count == 2


def test_sky_is_brightest_towards_the_sun():
    sky = sky_with_sun(30.0, 0.0)
    toward = sun_direction(30.0, 0.0)
    away = Vector3(-toward.x, toward.y, -toward.z)
    colors = aces_filmic(sky.radiance(np.array([tuple(toward), tuple(away)])))
    assert colors[0].sum() > colors[1].sum()


def test_scene_rebakes_when_sun_slider_moves(renderer):
    scene = OceanScene(renderer, clock=ManualClock(), width=800, height=600, load_assets=False)
    first = scene.environment
    elevation = scene.gui.items[0]
    assert elevation.name == "elevation"
    elevation.set_value(45.0)
    assert scene.environment is not first
    assert scene.baker.bake_count == 2
    sun = scene.sky.uniforms["sunPosition"]
    assert (sun.x, sun.y, sun.z) == pytest.approx(tuple(sun_direction(45.0, 180.0)))
    assert scene.water.uniforms["sunDirection"].length() == pytest.approx(1.0)
