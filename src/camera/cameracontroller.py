"""CameraController: keyboard movement state and per-frame camera translation.

Key events only flip flags; the frame calls update(dt) once to move the
camera. Holding opposite keys applies both translations, which cancel.
"""

from __future__ import annotations

from dataclasses import dataclass

import pygame

from config import MOVE_SPEED


@dataclass
class MovementState:
    forward: bool = False
    backward: bool = False
    left: bool = False
    right: bool = False

    def any(self) -> bool:
        return self.forward or self.backward or self.left or self.right

    def release_all(self) -> None:
        self.forward = self.backward = self.left = self.right = False


KEY_BINDINGS = {
    pygame.K_w: "forward",
    pygame.K_s: "backward",
    pygame.K_a: "left",
    pygame.K_d: "right",
}


class CameraController:
    def __init__(self, camera, *, speed: float = MOVE_SPEED, bindings=None):
        self.camera = camera
        self.speed = float(speed)
        self.bindings = dict(bindings or KEY_BINDINGS)
        self.movement = MovementState()

    def handle_key(self, key: int, pressed: bool) -> bool:
        """Set or clear the flag bound to `key`. Returns False for untracked keys."""
        flag = self.bindings.get(key)
        if flag is None:
            return False
        setattr(self.movement, flag, bool(pressed))
        return True

    def update(self, dt: float) -> bool:
        """Translate the camera for the flags currently held. Returns True if any was."""
        step = self.speed * dt
        m = self.movement
        if m.forward:
            self.camera.translate_z(-step)
        if m.backward:
            self.camera.translate_z(step)
        if m.left:
            self.camera.translate_x(-step)
        if m.right:
            self.camera.translate_x(step)
        return m.any()


__all__ = ["CameraController", "MovementState", "KEY_BINDINGS"]
