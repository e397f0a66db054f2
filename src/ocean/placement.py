"""Putting background-loaded models into the scene.

Loader futures finish on worker threads; their done-callbacks only enqueue
the future. poll() runs on the main thread before a frame and does the
actual scene mutation, so the scene graph is never touched mid-frame.
"""

from __future__ import annotations

import queue
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from pygame.math import Vector3

from core.animation import AnimationMixer, AnimationRegistry


@dataclass
class ModelPlacement:
    name: str
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    scale: float = 1.0
    rotation: Optional[Tuple[float, float, float]] = None
    on_placed: Optional[Callable[[object], None]] = None


class AssetPlacer:
    def __init__(self, scene, registry: AnimationRegistry) -> None:
        self.scene = scene
        self.registry = registry
        self.placed: List[Tuple[ModelPlacement, object]] = []
        self.failed: List[Tuple[ModelPlacement, BaseException]] = []
        self._pending = 0
        self._done: "queue.SimpleQueue[Tuple[Future, ModelPlacement]]" = queue.SimpleQueue()

    @property
    def pending(self) -> int:
        """Requests not yet applied (still loading, or finished and queued)."""
        return self._pending

    def place(self, future: Future, placement: ModelPlacement) -> Future:
        self._pending += 1
        future.add_done_callback(lambda f: self._done.put((f, placement)))
        return future

    def poll(self) -> int:
        """Apply every finished load; returns how many were handled."""
        handled = 0
        while True:
            try:
                future, placement = self._done.get_nowait()
            except queue.Empty:
                break
            self._pending -= 1
            handled += 1
            if future.cancelled():
                continue
            error = future.exception()
            if error is not None:
                self.failed.append((placement, error))
                print(f"Failed to load {placement.name}: {error}")
                continue
            self._apply(future.result(), placement)
        return handled

    def _apply(self, result, placement: ModelPlacement) -> None:
        node = result.scene
        node.name = placement.name
        node.position = Vector3(placement.position)
        node.scale = Vector3(placement.scale, placement.scale, placement.scale)
        if placement.rotation is not None:
            node.rotation = Vector3(placement.rotation)
        self.scene.add(node)

        if result.animations:
            mixer = AnimationMixer(node)
            for clip in result.animations:
                mixer.clip_action(clip).play()
            self.registry.add(mixer)

        self.placed.append((placement, node))
        if placement.on_placed is not None:
            placement.on_placed(node)
