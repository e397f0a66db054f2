import math

import numpy as np
import pytest
from pygame.math import Vector3

from core.object3d import Group, Object3D, euler_to_matrix, matrix_to_quaternion, quaternion_to_matrix


def test_quaternion_round_trip_for_quarter_turn():
    half = math.sqrt(0.5)
    m = quaternion_to_matrix((0.0, half, 0.0, half))
    assert m @ np.array([1.0, 0.0, 0.0]) == pytest.approx([0.0, 0.0, -1.0])
    assert matrix_to_quaternion(m) == pytest.approx((0.0, half, 0.0, half))


def test_euler_and_quaternion_agree():
    half = math.sqrt(0.5)
    assert euler_to_matrix(0.0, math.pi / 2, 0.0) == pytest.approx(quaternion_to_matrix((0.0, half, 0.0, half)))


def test_quaternion_overrides_euler():
    node = Object3D(rotation=Vector3(1.0, 2.0, 3.0))
    node.quaternion = (0.0, 0.0, 0.0, 1.0)
    assert node.rotation_matrix() == pytest.approx(np.eye(3))


def test_world_position_composes_parents():
    root = Group(position=Vector3(100, -150, 8500), scale=Vector3(3, 3, 3))
    child = root.add(Object3D(position=Vector3(1, 0, 0), name="prop"))
    assert tuple(child.world_position()) == pytest.approx((103, -150, 8500))
    assert root.find("prop") is child
    assert [n.name for n in root.traverse()] == ["", "prop"]


def test_reparenting_detaches_from_old_parent():
    a, b = Group(), Group()
    child = a.add(Object3D())
    b.add(child)
    assert child.parent is b
    assert a.children == []
