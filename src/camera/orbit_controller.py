"""Mouse orbit around a fixed target point.

The camera keeps whatever offset it has from the target; update() converts
that offset to spherical coordinates, applies pending rotate/zoom input,
clamps distance and polar angle, then re-aims the camera. Keyboard movement
changes the camera position without moving the target, so the next orbit
update starts from wherever the camera ended up.
"""

from __future__ import annotations

import math

from pygame.math import Vector3

from config import (
    ORBIT_TARGET,
    ORBIT_MIN_DISTANCE,
    ORBIT_MAX_DISTANCE,
    ORBIT_MAX_POLAR_ANGLE,
    ORBIT_ROTATE_SPEED,
    ORBIT_ZOOM_SPEED,
)

_EPS = 1e-6


class OrbitController:
    def __init__(
        self,
        camera,
        *,
        target=ORBIT_TARGET,
        min_distance: float = ORBIT_MIN_DISTANCE,
        max_distance: float = ORBIT_MAX_DISTANCE,
        max_polar_angle: float = ORBIT_MAX_POLAR_ANGLE,
        rotate_speed: float = ORBIT_ROTATE_SPEED,
        zoom_speed: float = ORBIT_ZOOM_SPEED,
        viewport_height: int = 900,
    ) -> None:
        self.camera = camera
        self.target = Vector3(target)
        self.min_distance = float(min_distance)
        self.max_distance = float(max_distance)
        self.max_polar_angle = float(max_polar_angle)
        self.rotate_speed = float(rotate_speed)
        self.zoom_speed = float(zoom_speed)
        self.viewport_height = int(viewport_height)

        self._theta_delta = 0.0
        self._phi_delta = 0.0
        self._scale = 1.0
        self._dragging = False

    # --------------------------- input ----------------------------------
    def on_mouse_button(self, button: int, pressed: bool) -> None:
        if button == 1:
            self._dragging = pressed

    def on_mouse_motion(self, dx: float, dy: float) -> bool:
        if not self._dragging:
            return False
        h = max(1, self.viewport_height)
        self.rotate_left(2.0 * math.pi * dx / h * self.rotate_speed)
        self.rotate_up(2.0 * math.pi * dy / h * self.rotate_speed)
        self.update()
        return True

    def on_mouse_wheel(self, y: int) -> None:
        scale = 0.95 ** self.zoom_speed
        if y > 0:
            self._scale *= scale
        elif y < 0:
            self._scale /= scale
        self.update()

    def rotate_left(self, angle: float) -> None:
        self._theta_delta -= angle

    def rotate_up(self, angle: float) -> None:
        self._phi_delta -= angle

    # --------------------------- update ---------------------------------
    def update(self) -> None:
        offset = self.camera.position - self.target
        radius = offset.length()
        if radius < _EPS:
            offset = Vector3(0, 0, 1)
            radius = 1.0

        theta = math.atan2(offset.x, offset.z)
        phi = math.acos(max(-1.0, min(1.0, offset.y / radius)))

        theta += self._theta_delta
        phi += self._phi_delta
        phi = max(_EPS, min(self.max_polar_angle, phi))

        radius *= self._scale
        radius = max(self.min_distance, min(self.max_distance, radius))

        sin_phi = math.sin(phi)
        offset = Vector3(
            radius * sin_phi * math.sin(theta),
            radius * math.cos(phi),
            radius * sin_phi * math.cos(theta),
        )
        self.camera.position = self.target + offset
        self.camera.look_at(self.target)

        self._theta_delta = 0.0
        self._phi_delta = 0.0
        self._scale = 1.0

    def distance(self) -> float:
        return (self.camera.position - self.target).length()


__all__ = ["OrbitController"]
