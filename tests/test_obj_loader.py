import numpy as np
import pytest
from PIL import Image

from loaders.errors import AssetLoadError
from loaders.obj_loader import load_mtl, load_obj

MTL = """\
# two materials
newmtl sand
Kd 0.9 0.8 0.5
d 1.0
newmtl glass
Kd 0.2 0.3 0.4
Tr 0.25
newmtl grass
Kd 0.1 0.6 0.1
map_Kd -s 1 1 1 grass.png
"""

OBJ = """\
o island
v 0 0 0
v 1 0 0
v 1 0 1
v 0 0 1
v 0 1 0
vt 0 0
vt 1 0
vt 1 1
vt 0 1
vn 0 1 0
usemtl sand
f 1/1/1 2/2/1 3/3/1 4/4/1
usemtl glass
f -5 -4 -1
o palm
usemtl grass
f 1/1 2/2 5/3
"""


@pytest.fixture
def model_dir(tmp_path):
    (tmp_path / "island.mtl").write_text(MTL)
    (tmp_path / "island.obj").write_text(OBJ)
    Image.new("RGBA", (2, 2), (0, 200, 0, 255)).save(tmp_path / "grass.png")
    return tmp_path


def test_load_mtl(model_dir):
    materials = load_mtl(str(model_dir / "island.mtl"))
    assert set(materials) == {"sand", "glass", "grass"}
    assert materials["sand"].color == pytest.approx((0.9, 0.8, 0.5, 1.0))
    assert materials["glass"].color[3] == pytest.approx(0.75)
    assert materials["glass"].transparent
    assert materials["grass"].image.shape == (2, 2, 4)
    assert materials["sand"].image is None


def test_quad_becomes_two_triangles(model_dir):
    materials = load_mtl(str(model_dir / "island.mtl"))
    root = load_obj(str(model_dir / "island.obj"), materials)
    island = root.find("island")
    sand, glass = island.meshes
    assert sand.material is materials["sand"]
    assert sand.triangle_count == 2
    assert sand.normals == pytest.approx(np.tile([0, 1, 0], (6, 1)))
    assert sand.uvs.shape == (6, 2)
    assert glass.triangle_count == 1
    assert glass.uvs is None


def test_negative_indices_and_flat_normals(model_dir):
    root = load_obj(str(model_dir / "island.obj"), load_mtl(str(model_dir / "island.mtl")))
    glass = root.find("island").meshes[1]
    # -5 -4 -1 resolve to vertices 1, 2, 5
    assert glass.positions.tolist() == [[0, 0, 0], [1, 0, 0], [0, 1, 0]]
    assert np.linalg.norm(glass.normals, axis=1) == pytest.approx([1, 1, 1])


def test_groups_become_children(model_dir):
    root = load_obj(str(model_dir / "island.obj"), load_mtl(str(model_dir / "island.mtl")))
    assert [c.name for c in root.children] == ["island", "palm"]
    palm = root.find("palm")
    assert palm.meshes[0].material.name == "grass"
    assert palm.meshes[0].normals.shape == (3, 3)


def test_unknown_material_falls_back_to_default(model_dir):
    root = load_obj(str(model_dir / "island.obj"), {})
    assert root.find("island").meshes[0].material.color == (1.0, 1.0, 1.0, 1.0)


def test_bad_index_raises(tmp_path):
    path = tmp_path / "broken.obj"
    path.write_text("v 0 0 0\nv 1 0 0\nf 1 2 7\n")
    with pytest.raises(AssetLoadError):
        load_obj(str(path))
