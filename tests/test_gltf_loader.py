import math

import numpy as np
import pytest
from pygltflib import (
    GLTF2,
    Accessor,
    Animation,
    AnimationChannel,
    AnimationChannelTarget,
    AnimationSampler,
    Asset,
    Attributes,
    Buffer,
    BufferView,
    Material,
    Mesh,
    Node,
    PbrMetallicRoughness,
    Primitive,
    Scene,
)

from core.animation import AnimationMixer
from loaders.errors import AssetLoadError
from loaders.gltf_loader import load_gltf

FLOAT = 5126
UBYTE = 5121
USHORT = 5123


class BlobBuilder:
    """Packs arrays into one buffer and describes them as accessors."""

    def __init__(self):
        self.blob = b""
        self.views = []
        self.accessors = []

    def add(self, array, acc_type, component=FLOAT, normalized=None, stride=None, raw=None):
        data = raw if raw is not None else array.tobytes()
        while len(self.blob) % 4:
            self.blob += b"\0"
        self.views.append(BufferView(buffer=0, byteOffset=len(self.blob), byteLength=len(data), byteStride=stride))
        self.blob += data
        self.accessors.append(
            Accessor(
                bufferView=len(self.views) - 1,
                componentType=component,
                count=len(array),
                type=acc_type,
                normalized=normalized,
            )
        )
        return len(self.accessors) - 1


def triangle_gltf(builder, **node_kwargs):
    positions = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=np.float32)
    indices = np.array([0, 1, 2], dtype=np.uint16)
    pos = builder.add(positions, "VEC3")
    idx = builder.add(indices, "SCALAR", USHORT)
    gltf = GLTF2(
        asset=Asset(version="2.0"),
        scene=0,
        scenes=[Scene(nodes=[0])],
        nodes=[Node(name="hull", mesh=0, **node_kwargs)],
        meshes=[Mesh(primitives=[Primitive(attributes=Attributes(POSITION=pos), indices=idx, material=0)])],
        materials=[Material(pbrMetallicRoughness=PbrMetallicRoughness(baseColorFactor=[0.2, 0.4, 0.6, 1.0]))],
    )
    return gltf


def finish(gltf, builder, path):
    gltf.accessors = builder.accessors
    gltf.bufferViews = builder.views
    gltf.buffers = [Buffer(byteLength=len(builder.blob))]
    gltf.set_binary_blob(builder.blob)
    gltf.save_binary(str(path))
    return str(path)


def test_mesh_and_material(tmp_path):
    builder = BlobBuilder()
    gltf = triangle_gltf(builder, translation=[1.0, 2.0, 3.0], scale=[2.0, 2.0, 2.0])
    result = load_gltf(finish(gltf, builder, tmp_path / "sub.glb"))

    hull = result.scene.find("hull")
    assert tuple(hull.position) == (1.0, 2.0, 3.0)
    assert tuple(hull.scale) == (2.0, 2.0, 2.0)
    assert hull.quaternion == (0.0, 0.0, 0.0, 1.0)
    (mesh,) = hull.meshes
    assert mesh.triangle_count == 1
    assert mesh.indices.tolist() == [0, 1, 2]
    # normals computed from winding
    assert mesh.normals == pytest.approx(np.tile([0, 0, 1], (3, 1)))
    assert mesh.material.color == pytest.approx((0.2, 0.4, 0.6, 1.0))
    assert result.animations == []


def test_matrix_node_is_decomposed(tmp_path):
    builder = BlobBuilder()
    c, s = math.cos(math.pi / 2), math.sin(math.pi / 2)
    # column-major: rotate 90 degrees about z, scale 3, translate (5, 0, 0)
    matrix = [3 * c, 3 * s, 0, 0, -3 * s, 3 * c, 0, 0, 0, 0, 3, 0, 5, 0, 0, 1]
    gltf = triangle_gltf(builder, matrix=matrix)
    hull = load_gltf(finish(gltf, builder, tmp_path / "m.glb")).scene.find("hull")
    assert tuple(hull.position) == pytest.approx((5, 0, 0))
    assert tuple(hull.scale) == pytest.approx((3, 3, 3))
    assert hull.quaternion == pytest.approx((0, 0, math.sqrt(0.5), math.sqrt(0.5)), abs=1e-6)


def test_strided_and_normalized_accessors(tmp_path):
    builder = BlobBuilder()
    gltf = triangle_gltf(builder)
    # interleave uv pairs with 4 bytes of padding per element
    uvs = np.array([[0, 0], [255, 0], [0, 255]], dtype=np.uint8)
    padded = np.zeros((3, 4), dtype=np.uint8)
    padded[:, :2] = uvs
    uv_index = builder.add(uvs, "VEC2", UBYTE, normalized=True, stride=4, raw=padded.tobytes())
    gltf.meshes[0].primitives[0].attributes.TEXCOORD_0 = uv_index
    mesh = load_gltf(finish(gltf, builder, tmp_path / "uv.glb")).scene.find("hull").meshes[0]
    assert mesh.uvs.tolist() == [[0, 0], [1, 0], [0, 1]]


def test_animation_half_way(tmp_path):
    builder = BlobBuilder()
    gltf = triangle_gltf(builder)
    times = np.array([0.0, 2.0], dtype=np.float32)
    moves = np.array([[0, 0, 0], [10, 0, 0]], dtype=np.float32)
    t_idx = builder.add(times, "SCALAR")
    v_idx = builder.add(moves, "VEC3")
    gltf.animations = [
        Animation(
            name="flap",
            samplers=[AnimationSampler(input=t_idx, output=v_idx, interpolation="LINEAR")],
            channels=[AnimationChannel(sampler=0, target=AnimationChannelTarget(node=0, path="translation"))],
        )
    ]
    result = load_gltf(finish(gltf, builder, tmp_path / "birds.glb"))

    (clip,) = result.animations
    assert clip.name == "flap"
    assert clip.duration == pytest.approx(2.0)
    mixer = AnimationMixer(result.scene)
    mixer.clip_action(clip).play()
    mixer.update(clip.duration / 2)
    assert result.scene.find("hull").position.x == pytest.approx(5.0)


def test_external_buffer(tmp_path):
    builder = BlobBuilder()
    gltf = triangle_gltf(builder)
    (tmp_path / "tri.bin").write_bytes(builder.blob)
    gltf.accessors = builder.accessors
    gltf.bufferViews = builder.views
    gltf.buffers = [Buffer(uri="tri.bin", byteLength=len(builder.blob))]
    gltf.save(str(tmp_path / "tri.gltf"))
    mesh = load_gltf(str(tmp_path / "tri.gltf")).scene.find("hull").meshes[0]
    assert mesh.positions.tolist() == [[0, 0, 0], [1, 0, 0], [0, 1, 0]]


def test_missing_file_raises(tmp_path):
    with pytest.raises((OSError, AssetLoadError)):
        load_gltf(str(tmp_path / "nope.glb"))
