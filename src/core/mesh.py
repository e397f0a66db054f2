"""Mesh data and lazy GPU upload.

Loaders build MeshData on worker threads from plain numpy arrays; nothing in
here touches OpenGL until draw() runs on the main thread with a live
context. The first draw uploads vertex and index buffers (VBOs) and the
material texture, later draws only bind them.
"""

from __future__ import annotations

import ctypes
from dataclasses import dataclass, field
from typing import Optional

import numpy as np


@dataclass
class Material:
    name: str = ""
    color: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)
    # (H, W, 4) uint8, row 0 at the top
    image: Optional[np.ndarray] = None
    double_sided: bool = False
    _texture: Optional[int] = field(default=None, repr=False, compare=False)

    @property
    def transparent(self) -> bool:
        return self.color[3] < 1.0

    def texture(self) -> Optional[int]:  # pragma: no cover - visual
        if self.image is None:
            return None
        if self._texture is None:
            from textures.texture_utils import upload_image

            self._texture = upload_image(self.image, repeat=True)
        return self._texture


def compute_flat_normals(positions: np.ndarray, indices: Optional[np.ndarray]) -> np.ndarray:
    """Per-vertex normals accumulated from face normals (area weighted)."""
    normals = np.zeros_like(positions, dtype=np.float32)
    tris = (
        indices.reshape(-1, 3)
        if indices is not None
        else np.arange(len(positions), dtype=np.uint32).reshape(-1, 3)
    )
    if len(tris) == 0:
        return normals
    a = positions[tris[:, 0]]
    b = positions[tris[:, 1]]
    c = positions[tris[:, 2]]
    face = np.cross(b - a, c - a)
    for k in range(3):
        np.add.at(normals, tris[:, k], face)
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    lengths[lengths == 0] = 1.0
    return (normals / lengths).astype(np.float32)


@dataclass
class MeshData:
    positions: np.ndarray
    normals: Optional[np.ndarray] = None
    uvs: Optional[np.ndarray] = None
    indices: Optional[np.ndarray] = None
    material: Material = field(default_factory=Material)
    _vbo: Optional[int] = field(default=None, repr=False, compare=False)
    _ibo: Optional[int] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        self.positions = np.ascontiguousarray(self.positions, dtype=np.float32).reshape(-1, 3)
        if self.indices is not None:
            self.indices = np.ascontiguousarray(self.indices, dtype=np.uint32).reshape(-1)
        if self.normals is None:
            self.normals = compute_flat_normals(self.positions, self.indices)
        else:
            self.normals = np.ascontiguousarray(self.normals, dtype=np.float32).reshape(-1, 3)
        if self.uvs is not None:
            self.uvs = np.ascontiguousarray(self.uvs, dtype=np.float32).reshape(-1, 2)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        if self.indices is not None:
            return len(self.indices) // 3
        return self.vertex_count // 3

    def interleaved(self) -> np.ndarray:
        """[x, y, z, nx, ny, nz, u, v] per vertex as float32."""
        uvs = self.uvs if self.uvs is not None else np.zeros((self.vertex_count, 2), np.float32)
        return np.ascontiguousarray(np.hstack([self.positions, self.normals, uvs]), dtype=np.float32)

    # ------------------------------------------------------------------
    def _upload(self) -> None:  # pragma: no cover - visual
        from OpenGL.GL import (
            glGenBuffers,
            glBindBuffer,
            glBufferData,
            GL_ARRAY_BUFFER,
            GL_ELEMENT_ARRAY_BUFFER,
            GL_STATIC_DRAW,
        )

        data = self.interleaved()
        self._vbo = glGenBuffers(1)
        glBindBuffer(GL_ARRAY_BUFFER, self._vbo)
        glBufferData(GL_ARRAY_BUFFER, data.nbytes, data, GL_STATIC_DRAW)
        glBindBuffer(GL_ARRAY_BUFFER, 0)
        if self.indices is not None:
            self._ibo = glGenBuffers(1)
            glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self._ibo)
            glBufferData(GL_ELEMENT_ARRAY_BUFFER, self.indices.nbytes, self.indices, GL_STATIC_DRAW)
            glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, 0)

    def draw(self) -> None:  # pragma: no cover - visual
        from OpenGL.GL import (
            glBindBuffer,
            glBindTexture,
            glEnableClientState,
            glDisableClientState,
            glVertexPointer,
            glNormalPointer,
            glTexCoordPointer,
            glDrawArrays,
            glDrawElements,
            glEnable,
            glDisable,
            glBlendFunc,
            glColor4f,
            GL_ARRAY_BUFFER,
            GL_ELEMENT_ARRAY_BUFFER,
            GL_FLOAT,
            GL_UNSIGNED_INT,
            GL_TRIANGLES,
            GL_VERTEX_ARRAY,
            GL_NORMAL_ARRAY,
            GL_TEXTURE_COORD_ARRAY,
            GL_TEXTURE_2D,
            GL_BLEND,
            GL_CULL_FACE,
            GL_SRC_ALPHA,
            GL_ONE_MINUS_SRC_ALPHA,
        )

        if self.vertex_count == 0:
            return
        if self._vbo is None:
            self._upload()

        stride = 8 * 4
        glBindBuffer(GL_ARRAY_BUFFER, self._vbo)
        glEnableClientState(GL_VERTEX_ARRAY)
        glVertexPointer(3, GL_FLOAT, stride, None)
        glEnableClientState(GL_NORMAL_ARRAY)
        glNormalPointer(GL_FLOAT, stride, ctypes.c_void_p(12))

        tex = self.material.texture()
        if tex is not None and self.uvs is not None:
            glEnableClientState(GL_TEXTURE_COORD_ARRAY)
            glTexCoordPointer(2, GL_FLOAT, stride, ctypes.c_void_p(24))
            glEnable(GL_TEXTURE_2D)
            glBindTexture(GL_TEXTURE_2D, tex)
        if self.material.transparent:
            glEnable(GL_BLEND)
            glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        if not self.material.double_sided:
            glEnable(GL_CULL_FACE)

        glColor4f(*self.material.color)
        if self._ibo is not None:
            glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self._ibo)
            glDrawElements(GL_TRIANGLES, len(self.indices), GL_UNSIGNED_INT, None)
            glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, 0)
        else:
            glDrawArrays(GL_TRIANGLES, 0, self.vertex_count)

        glDisable(GL_CULL_FACE)
        glDisable(GL_BLEND)
        glDisable(GL_TEXTURE_2D)
        glDisableClientState(GL_TEXTURE_COORD_ARRAY)
        glDisableClientState(GL_NORMAL_ARRAY)
        glDisableClientState(GL_VERTEX_ARRAY)
        glBindBuffer(GL_ARRAY_BUFFER, 0)
