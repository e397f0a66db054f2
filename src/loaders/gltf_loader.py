"""glTF 2.0 / GLB loading with pygltflib.

load_gltf() returns the default scene as an Object3D tree plus the file's
animation clips. Everything is plain numpy data; GPU upload happens later on
the render thread. Skinning and morph targets are not applied: skinned
meshes are drawn in their bind pose and only node transforms animate.
"""

from __future__ import annotations

import base64
import io
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
from PIL import Image
from pygltflib import GLTF2
from pygame.math import Vector3

from core.mesh import Material, MeshData
from core.object3d import Group, Object3D, matrix_to_quaternion
from loaders.errors import AssetLoadError
from core.animation import AnimationClip, KeyframeTrack

COMPONENT_TYPES = {
    5120: np.int8,
    5121: np.uint8,
    5122: np.int16,
    5123: np.uint16,
    5125: np.uint32,
    5126: np.float32,
}

TYPE_SIZES = {
    "SCALAR": 1,
    "VEC2": 2,
    "VEC3": 3,
    "VEC4": 4,
    "MAT2": 4,
    "MAT3": 9,
    "MAT4": 16,
}

TRIANGLES = 4


@dataclass
class GLTFResult:
    scene: Group
    animations: List[AnimationClip] = field(default_factory=list)


class _Reader:
    def __init__(self, gltf: GLTF2, base_dir: str) -> None:
        self.gltf = gltf
        self.base_dir = base_dir
        self._buffers: Dict[int, bytes] = {}

    def buffer_bytes(self, index: int) -> bytes:
        """Bytes of a buffer: data URI, external file, or the GLB binary chunk."""
        cached = self._buffers.get(index)
        if cached is not None:
            return cached
        buffer = self.gltf.buffers[index]
        if buffer.uri:
            if buffer.uri.startswith("data:"):
                comma = buffer.uri.find(",")
                raw = base64.b64decode(buffer.uri[comma + 1:])
            else:
                with open(os.path.join(self.base_dir, buffer.uri), "rb") as f:
                    raw = f.read()
        else:
            raw = self.gltf.binary_blob()
            if raw is None:
                raise AssetLoadError("buffer has no uri and the file has no binary chunk")
        self._buffers[index] = raw
        return raw

    def buffer_view_bytes(self, index: int) -> bytes:
        bv = self.gltf.bufferViews[index]
        raw = self.buffer_bytes(bv.buffer)
        start = bv.byteOffset or 0
        return raw[start:start + bv.byteLength]

    def accessor(self, index: int) -> np.ndarray:
        """Accessor data as float32 (or integer for indices), shape (count, n) or (count,)."""
        acc = self.gltf.accessors[index]
        dtype = COMPONENT_TYPES.get(acc.componentType)
        if dtype is None:
            raise AssetLoadError(f"componentType {acc.componentType} not supported")
        width = TYPE_SIZES.get(acc.type)
        if width is None:
            raise AssetLoadError(f"accessor type {acc.type} not recognised")
        if acc.bufferView is None:
            # all-zero accessor (sparse data not supported)
            out = np.zeros((acc.count, width), dtype=dtype)
        else:
            bv = self.gltf.bufferViews[acc.bufferView]
            raw = self.buffer_bytes(bv.buffer)
            start = (bv.byteOffset or 0) + (acc.byteOffset or 0)
            itemsize = np.dtype(dtype).itemsize
            elem_size = itemsize * width
            stride = bv.byteStride or elem_size
            if stride == elem_size:
                out = np.frombuffer(raw, dtype=dtype, count=acc.count * width, offset=start)
                out = out.reshape(acc.count, width).copy()
            else:
                out = np.ndarray(
                    shape=(acc.count, width),
                    dtype=dtype,
                    buffer=raw,
                    offset=start,
                    strides=(stride, itemsize),
                ).copy()

        if acc.normalized and np.issubdtype(dtype, np.integer):
            info = np.iinfo(dtype)
            out = np.maximum(out.astype(np.float32) / info.max, -1.0)
        if width == 1:
            out = out.reshape(-1)
        return out

    def image(self, index: int) -> Optional[np.ndarray]:
        img = self.gltf.images[index]
        if img.bufferView is not None:
            data = self.buffer_view_bytes(img.bufferView)
        elif img.uri and img.uri.startswith("data:"):
            data = base64.b64decode(img.uri[img.uri.find(",") + 1:])
        elif img.uri:
            with open(os.path.join(self.base_dir, img.uri), "rb") as f:
                data = f.read()
        else:
            return None
        with Image.open(io.BytesIO(data)) as pil:
            return np.asarray(pil.convert("RGBA"), dtype=np.uint8)


def _material(reader: _Reader, index: Optional[int], cache: Dict[int, Material]) -> Material:
    if index is None:
        return Material()
    if index in cache:
        return cache[index]
    mat = reader.gltf.materials[index]
    color = (1.0, 1.0, 1.0, 1.0)
    image = None
    pbr = mat.pbrMetallicRoughness
    if pbr is not None:
        if pbr.baseColorFactor:
            color = tuple(float(c) for c in pbr.baseColorFactor)
        if pbr.baseColorTexture is not None:
            texture = reader.gltf.textures[pbr.baseColorTexture.index]
            if texture.source is not None:
                image = reader.image(texture.source)
    material = Material(name=mat.name or "", color=color, image=image, double_sided=bool(mat.doubleSided))
    cache[index] = material
    return material


def _mesh(reader: _Reader, index: int, materials: Dict[int, Material]) -> List[MeshData]:
    out = []
    for prim in reader.gltf.meshes[index].primitives:
        mode = TRIANGLES if prim.mode is None else prim.mode
        if mode != TRIANGLES or prim.attributes.POSITION is None:
            continue
        positions = reader.accessor(prim.attributes.POSITION)
        normals = uvs = indices = None
        if getattr(prim.attributes, "NORMAL", None) is not None:
            normals = reader.accessor(prim.attributes.NORMAL)
        if getattr(prim.attributes, "TEXCOORD_0", None) is not None:
            uvs = reader.accessor(prim.attributes.TEXCOORD_0)
        if prim.indices is not None:
            indices = reader.accessor(prim.indices).astype(np.uint32)
        out.append(
            MeshData(
                positions=positions,
                normals=normals,
                uvs=uvs,
                indices=indices,
                material=_material(reader, prim.material, materials),
            )
        )
    return out


def _node(reader: _Reader, index: int, nodes: Dict[int, Object3D], materials) -> Object3D:
    src = reader.gltf.nodes[index]
    node = Object3D(name=src.name or f"node_{index}")
    if src.matrix:
        m = np.array(src.matrix, dtype=np.float64).reshape(4, 4).T
        t = m[:3, 3]
        s = np.linalg.norm(m[:3, :3], axis=0)
        s[s == 0] = 1.0
        node.position = Vector3(*t)
        node.scale = Vector3(*s)
        node.quaternion = matrix_to_quaternion(m[:3, :3] / s)
    else:
        if src.translation:
            node.position = Vector3(*src.translation)
        if src.scale:
            node.scale = Vector3(*src.scale)
        node.quaternion = tuple(float(c) for c in (src.rotation or (0.0, 0.0, 0.0, 1.0)))
    if src.mesh is not None:
        node.meshes = _mesh(reader, src.mesh, materials)
    nodes[index] = node
    for child in src.children or []:
        node.add(_node(reader, child, nodes, materials))
    return node


def _animations(reader: _Reader, nodes: Dict[int, Object3D]) -> List[AnimationClip]:
    clips = []
    for i, anim in enumerate(reader.gltf.animations or []):
        tracks = []
        for channel in anim.channels:
            target = channel.target
            node = nodes.get(target.node) if target.node is not None else None
            if node is None or target.path not in ("translation", "rotation", "scale"):
                continue
            sampler = anim.samplers[channel.sampler]
            times = reader.accessor(sampler.input).astype(np.float64).reshape(-1)
            values = reader.accessor(sampler.output).astype(np.float64)
            tracks.append(
                KeyframeTrack(
                    node=node,
                    path=target.path,
                    times=times,
                    values=values.reshape(len(values), -1),
                    interpolation=sampler.interpolation or "LINEAR",
                )
            )
        clips.append(AnimationClip(name=anim.name or f"animation_{i}", tracks=tracks))
    return clips


def load_gltf(path: str) -> GLTFResult:
    """Parse a .gltf or .glb file into an Object3D tree and animation clips."""
    gltf = GLTF2().load(path)
    if gltf is None:
        raise AssetLoadError(f"could not parse {path}")
    reader = _Reader(gltf, os.path.dirname(os.path.abspath(path)))

    scene_index = gltf.scene if gltf.scene is not None else 0
    root = Group(name=os.path.basename(path))
    nodes: Dict[int, Object3D] = {}
    materials: Dict[int, Material] = {}
    if gltf.scenes:
        for node_index in gltf.scenes[scene_index].nodes or []:
            root.add(_node(reader, node_index, nodes, materials))

    return GLTFResult(scene=root, animations=_animations(reader, nodes))
