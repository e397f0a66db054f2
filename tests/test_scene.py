from pygame.math import Vector3

from core.object3d import Group
from core.scene import AmbientLight, DirectionalLight, Scene


def test_lights_are_found_below_groups():
    scene = Scene()
    rig = scene.add(Group())
    ambient = scene.add(AmbientLight(intensity=0.5))
    sun = rig.add(DirectionalLight(position=Vector3(0, 100, 0)))
    assert scene.lights() == [sun, ambient]


def test_add_detaches_from_previous_parent():
    scene = Scene()
    group = scene.add(Group())
    child = group.add(Group())
    scene.add(child)
    assert child not in group.children
    assert scene.children == [group, child]
    scene.remove(child)
    assert scene.children == [group]


def test_scene_keeps_no_per_frame_hooks():
    scene = Scene()
    assert not hasattr(scene, "updaters")
    assert not hasattr(scene, "update")
