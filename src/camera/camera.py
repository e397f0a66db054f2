import math
import numpy as np
from pygame.math import Vector3


class Camera:
    """Perspective camera with a yaw-then-pitch orientation.

    rotation.x is pitch, rotation.y is yaw, rotation.z is unused (no roll).
    The camera looks down its local -Z axis; local +X points to the right.
    """

    def __init__(self, position=None, rotation=None, fov=60, aspect=1.0, near=1.0, far=20000.0):
        # keep external API types the same (pygame.Vector3)
        self.position = position or Vector3(0, 0, 0)
        self.rotation = rotation or Vector3(0, 0, 0)  # pitch (x), yaw (y), roll (z)

        self.fov = float(fov)
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.projection_matrix = np.eye(4, dtype=np.float64)

        # NumPy rotation matrix (world -> camera)
        self._R = np.eye(3, dtype=np.float64)

        self.update_rotation()
        self.update_projection_matrix()

    def update_projection_matrix(self):
        """Recompute the OpenGL-style projection from fov/aspect/near/far."""
        f = 1.0 / math.tan(math.radians(self.fov) / 2.0)
        n, fa = self.near, self.far
        self.projection_matrix = np.array(
            [
                [f / self.aspect, 0.0, 0.0, 0.0],
                [0.0, f, 0.0, 0.0],
                [0.0, 0.0, (fa + n) / (n - fa), (2.0 * fa * n) / (n - fa)],
                [0.0, 0.0, -1.0, 0.0],
            ],
            dtype=np.float64,
        )
        return self.projection_matrix

    def update_rotation(self):
        """Precompute direction vectors (Vector3) and the rotation matrix (numpy)."""
        cp = math.cos(self.rotation.x)
        sp = math.sin(self.rotation.x)
        cy = math.cos(self.rotation.y)
        sy = math.sin(self.rotation.y)

        # Local +X in world space
        self._right = Vector3(cy, 0, -sy)
        # Local -Z in world space (view direction)
        self._forward = Vector3(-cp * sy, sp, -cp * cy)
        self._up = self._right.cross(self._forward)

        Ry = np.array([[cy, 0.0, -sy], [0.0, 1.0, 0.0], [sy, 0.0, cy]], dtype=np.float64)
        Rx = np.array([[1.0, 0.0, 0.0], [0.0, cp, sp], [0.0, -sp, cp]], dtype=np.float64)

        # world -> camera matrix: pitch * yaw (so application is R @ vector)
        self._R = Rx @ Ry

    @property
    def right(self) -> Vector3:
        return Vector3(self._right)

    @property
    def forward(self) -> Vector3:
        return Vector3(self._forward)

    def translate_x(self, distance: float) -> None:
        """Move along the camera's local X axis."""
        self.update_rotation()
        self.position += self._right * distance

    def translate_z(self, distance: float) -> None:
        """Move along the camera's local Z axis (negative is forward)."""
        self.update_rotation()
        self.position -= self._forward * distance

    def look_at(self, target) -> None:
        direction = Vector3(target) - self.position
        if direction.length_squared() == 0:
            return
        direction = direction.normalize()
        self.rotation.x = math.asin(max(-1.0, min(1.0, direction.y)))
        self.rotation.y = math.atan2(-direction.x, -direction.z)
        self.update_rotation()

    def view_matrix(self) -> np.ndarray:
        m = np.eye(4, dtype=np.float64)
        m[:3, :3] = self._R
        p = np.array([self.position.x, self.position.y, self.position.z])
        m[:3, 3] = -self._R @ p
        return m
