"""Wavefront OBJ and MTL parsing.

Only the subset used by static props: positions, texture coordinates,
normals, polygon faces (fan triangulated), material switches and object /
group names. Every run of faces sharing one material becomes one MeshData.
"""

from __future__ import annotations

import os
from typing import Dict, List, Optional, Tuple

import numpy as np
from PIL import Image

from core.mesh import Material, MeshData
from core.object3d import Group, Object3D
from loaders.errors import AssetLoadError


def _read_image(path: str) -> Optional[np.ndarray]:
    if not os.path.exists(path):
        print(f"Texture not found: {path}")
        return None
    with Image.open(path) as pil:
        return np.asarray(pil.convert("RGBA"), dtype=np.uint8)


def load_mtl(path: str) -> Dict[str, Material]:
    """Materials by name from a .mtl file."""
    base_dir = os.path.dirname(os.path.abspath(path))
    materials: Dict[str, Material] = {}
    current: Optional[Material] = None
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for raw in f:
            parts = raw.split("#", 1)[0].split()
            if not parts:
                continue
            tag, args = parts[0], parts[1:]
            if tag == "newmtl":
                current = Material(name=" ".join(args))
                materials[current.name] = current
            elif current is None:
                continue
            elif tag == "Kd" and len(args) >= 3:
                r, g, b = (float(v) for v in args[:3])
                current.color = (r, g, b, current.color[3])
            elif tag == "d" and args:
                current.color = (*current.color[:3], float(args[-1]))
            elif tag == "Tr" and args:
                current.color = (*current.color[:3], 1.0 - float(args[-1]))
            elif tag == "map_Kd" and args:
                # options like -s/-o come first; the file name is last
                current.image = _read_image(os.path.join(base_dir, args[-1]))
    return materials


def _resolve(index: str, count: int) -> int:
    i = int(index)
    resolved = count + i if i < 0 else i - 1
    if i == 0 or not 0 <= resolved < count:
        raise IndexError(index)
    return resolved


class _Run:
    """Faces collected for one (object, material) pair."""

    def __init__(self, material: Material) -> None:
        self.material = material
        self.corners: List[Tuple[int, int, int]] = []


def _build_mesh(run: _Run, v: List, vt: List, vn: List) -> MeshData:
    positions = np.array([v[c[0]] for c in run.corners], dtype=np.float32)
    has_uv = all(c[1] >= 0 for c in run.corners)
    has_normal = all(c[2] >= 0 for c in run.corners)
    uvs = np.array([vt[c[1]] for c in run.corners], dtype=np.float32) if has_uv else None
    normals = np.array([vn[c[2]] for c in run.corners], dtype=np.float32) if has_normal else None
    return MeshData(positions=positions, normals=normals, uvs=uvs, material=run.material)


def load_obj(path: str, materials: Optional[Dict[str, Material]] = None) -> Group:
    """Parse an .obj file into a Group with one child per object/group name."""
    materials = materials or {}
    v: List[Tuple[float, float, float]] = []
    vt: List[Tuple[float, float]] = []
    vn: List[Tuple[float, float, float]] = []

    root = Group(name=os.path.basename(path))
    default_material = Material()
    objects: List[Tuple[str, List[_Run]]] = [("default", [])]
    material = default_material

    def current_run() -> _Run:
        runs = objects[-1][1]
        if not runs or runs[-1].material is not material:
            runs.append(_Run(material))
        return runs[-1]

    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for lineno, raw in enumerate(f, 1):
            parts = raw.split("#", 1)[0].split()
            if not parts:
                continue
            tag, args = parts[0], parts[1:]
            try:
                if tag == "v":
                    v.append((float(args[0]), float(args[1]), float(args[2])))
                elif tag == "vt":
                    vt.append((float(args[0]), float(args[1]) if len(args) > 1 else 0.0))
                elif tag == "vn":
                    vn.append((float(args[0]), float(args[1]), float(args[2])))
                elif tag in ("o", "g"):
                    objects.append((" ".join(args) or "default", []))
                elif tag == "usemtl":
                    name = " ".join(args)
                    material = materials.get(name, default_material)
                elif tag == "f":
                    corners = []
                    for token in args:
                        fields = token.split("/")
                        vi = _resolve(fields[0], len(v))
                        ti = _resolve(fields[1], len(vt)) if len(fields) > 1 and fields[1] else -1
                        ni = _resolve(fields[2], len(vn)) if len(fields) > 2 and fields[2] else -1
                        corners.append((vi, ti, ni))
                    if len(corners) < 3:
                        continue
                    run = current_run()
                    for k in range(1, len(corners) - 1):
                        run.corners.extend((corners[0], corners[k], corners[k + 1]))
            except (IndexError, ValueError) as e:
                raise AssetLoadError(f"{path}:{lineno}: bad '{tag}' line") from e

    for name, runs in objects:
        runs = [r for r in runs if r.corners]
        if not runs:
            continue
        node = Object3D(name=name)
        node.meshes = [_build_mesh(r, v, vt, vn) for r in runs]
        root.add(node)
    return root
