import math
from dataclasses import dataclass

from pygame.math import Vector3

from config import SUN_ELEVATION, SUN_AZIMUTH

ELEVATION_RANGE = (-90.0, 180.0)
AZIMUTH_RANGE = (-180.0, 180.0)


@dataclass
class SunParameters:
    """Sun placement in degrees, edited from the GUI."""

    elevation: float = SUN_ELEVATION
    azimuth: float = SUN_AZIMUTH


def sun_direction(elevation: float, azimuth: float) -> Vector3:
    """Unit vector towards the sun.

    phi is the angle from the zenith, theta the angle around the y axis
    measured from +x towards +z.
    """
    phi = math.radians(90.0 - elevation)
    theta = math.radians(azimuth)
    return Vector3(
        math.sin(phi) * math.cos(theta),
        math.cos(phi),
        math.sin(phi) * math.sin(theta),
    )
