"""Scene-graph node with a position / rotation / scale transform.

Rotation is stored as Euler angles (radians, XYZ order) so GUI sliders can
bind to it directly. Nodes coming from glTF files (and anything driven by an
animation) carry a quaternion instead, which takes precedence when set.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Optional, Sequence

import numpy as np
from pygame.math import Vector3


def euler_to_matrix(rx: float, ry: float, rz: float) -> np.ndarray:
    """3x3 rotation matrix for intrinsic XYZ Euler angles (R = Rx @ Ry @ Rz)."""
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    Rx = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    Ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    Rz = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return Rx @ Ry @ Rz


def quaternion_to_matrix(q: Sequence[float]) -> np.ndarray:
    """3x3 rotation matrix for a quaternion given as (x, y, z, w)."""
    x, y, z, w = (float(c) for c in q)
    n = x * x + y * y + z * z + w * w
    if n < 1e-12:
        return np.eye(3)
    s = 2.0 / n
    return np.array(
        [
            [1.0 - s * (y * y + z * z), s * (x * y - z * w), s * (x * z + y * w)],
            [s * (x * y + z * w), 1.0 - s * (x * x + z * z), s * (y * z - x * w)],
            [s * (x * z - y * w), s * (y * z + x * w), 1.0 - s * (x * x + y * y)],
        ]
    )


def matrix_to_quaternion(m: np.ndarray) -> tuple[float, float, float, float]:
    """Quaternion (x, y, z, w) of a pure 3x3 rotation matrix."""
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0.0:
        s = 0.5 / math.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (m[2, 1] - m[1, 2]) * s
        y = (m[0, 2] - m[2, 0]) * s
        z = (m[1, 0] - m[0, 1]) * s
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
        w = (m[2, 1] - m[1, 2]) / s
        x = 0.25 * s
        y = (m[0, 1] + m[1, 0]) / s
        z = (m[0, 2] + m[2, 0]) / s
    elif m[1, 1] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
        w = (m[0, 2] - m[2, 0]) / s
        x = (m[0, 1] + m[1, 0]) / s
        y = 0.25 * s
        z = (m[1, 2] + m[2, 1]) / s
    else:
        s = 2.0 * math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
        w = (m[1, 0] - m[0, 1]) / s
        x = (m[0, 2] + m[2, 0]) / s
        y = (m[1, 2] + m[2, 1]) / s
        z = 0.25 * s
    return (float(x), float(y), float(z), float(w))


class Object3D:
    def __init__(self, position=None, rotation=None, scale=None, name: str = ""):
        self.name = name
        self.position = position or Vector3(0, 0, 0)
        self.rotation = rotation or Vector3(0, 0, 0)
        self.scale = scale or Vector3(1, 1, 1)
        self.quaternion: Optional[tuple[float, float, float, float]] = None
        self.visible = True
        self.parent: Optional[Object3D] = None
        self.children: List[Object3D] = []
        # MeshData instances drawn with this node's world transform
        self.meshes: list = []

    # ------------------------------------------------------------------
    def add(self, child: "Object3D") -> "Object3D":
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: "Object3D") -> None:
        if child in self.children:
            self.children.remove(child)
            child.parent = None

    def traverse(self) -> Iterator["Object3D"]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.traverse()

    def find(self, name: str) -> Optional["Object3D"]:
        for node in self.traverse():
            if node.name == name:
                return node
        return None

    # ------------------------------------------------------------------
    def rotation_matrix(self) -> np.ndarray:
        if self.quaternion is not None:
            return quaternion_to_matrix(self.quaternion)
        return euler_to_matrix(self.rotation.x, self.rotation.y, self.rotation.z)

    def matrix(self) -> np.ndarray:
        """Local 4x4 transform T @ R @ S (row-major, column vectors)."""
        m = np.eye(4)
        m[:3, :3] = self.rotation_matrix() * np.array(
            [self.scale.x, self.scale.y, self.scale.z]
        )
        m[:3, 3] = (self.position.x, self.position.y, self.position.z)
        return m

    def world_matrix(self) -> np.ndarray:
        m = self.matrix()
        node = self.parent
        while node is not None:
            m = node.matrix() @ m
            node = node.parent
        return m

    def world_position(self) -> Vector3:
        p = self.world_matrix()[:3, 3]
        return Vector3(float(p[0]), float(p[1]), float(p[2]))

    # ------------------------------------------------------------------
    def draw(self, camera) -> None:  # pragma: no cover - visual
        """Draw this node's meshes; the caller has already applied the world transform."""
        for mesh in self.meshes:
            mesh.draw()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, children={len(self.children)})"


class Group(Object3D):
    """Transform-only node used as the root of loaded models."""
