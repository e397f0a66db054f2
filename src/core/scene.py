from typing import Iterator, List, Optional
from dataclasses import dataclass, field

from pygame.math import Vector3

from core.object3d import Object3D


class AmbientLight(Object3D):
    def __init__(self, color=(1.0, 1.0, 1.0), intensity: float = 1.0) -> None:
        super().__init__(name="ambient_light")
        self.color = tuple(color)
        self.intensity = float(intensity)


class DirectionalLight(Object3D):
    """Light shining from `position` towards the origin."""

    def __init__(self, color=(1.0, 1.0, 1.0), intensity: float = 1.0, position=None) -> None:
        super().__init__(position=position or Vector3(0, 1, 0), name="directional_light")
        self.color = tuple(color)
        self.intensity = float(intensity)


@dataclass
class Scene:
    # Camera is optional so scenes without a 3D view don't need one.
    camera: Optional[object] = None
    children: List[Object3D] = field(default_factory=list)
    # Ambient lighting source (EnvironmentMap); None means plain lights only
    environment: Optional[object] = None

    def add(self, node: Object3D) -> Object3D:
        if node.parent is not None:
            node.parent.remove(node)
        self.children.append(node)
        return node

    def remove(self, node: Object3D) -> None:
        if node in self.children:
            self.children.remove(node)

    def traverse(self) -> Iterator[Object3D]:
        for node in self.children:
            yield from node.traverse()

    def lights(self) -> List[Object3D]:
        return [n for n in self.traverse() if isinstance(n, (AmbientLight, DirectionalLight))]

    # Optional per-event handler (scenes can override)
    def handle_event(self, event) -> None:
        pass

    # Scenes can own their full frame (input, update, render)
    def frame(self) -> None:  # pragma: no cover - visual
        pass
