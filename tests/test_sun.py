import math

import pytest

from ocean.sun import AZIMUTH_RANGE, ELEVATION_RANGE, SunParameters, sun_direction


def test_default_sun_vector():
    params = SunParameters()
    sun = sun_direction(params.elevation, params.azimuth)
    assert sun.x == pytest.approx(-0.9994, abs=1e-4)
    assert sun.y == pytest.approx(0.0349, abs=1e-4)
    assert sun.z == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize("elevation", [ELEVATION_RANGE[0], -45.0, 0.0, 2.0, 45.0, 90.0, 135.0, ELEVATION_RANGE[1]])
@pytest.mark.parametrize("azimuth", [AZIMUTH_RANGE[0], -90.0, 0.0, 33.3, 90.0, AZIMUTH_RANGE[1]])
def test_sun_direction_is_unit_length(elevation, azimuth):
    assert sun_direction(elevation, azimuth).length() == pytest.approx(1.0, abs=1e-9)


def test_zenith_and_horizon():
    up = sun_direction(90.0, 0.0)
    assert (up.x, up.y, up.z) == pytest.approx((0.0, 1.0, 0.0), abs=1e-9)
    east = sun_direction(0.0, 90.0)
    assert (east.x, east.y, east.z) == pytest.approx((0.0, 0.0, 1.0), abs=1e-9)


def test_matches_spherical_formula():
    phi, theta = math.radians(88.0), math.radians(180.0)
    sun = sun_direction(2.0, 180.0)
    expected = (math.sin(phi) * math.cos(theta), math.cos(phi), math.sin(phi) * math.sin(theta))
    assert (sun.x, sun.y, sun.z) == pytest.approx(expected)
