"""Keyframe animation: clips, per-model mixers and the mixer registry.

A clip is a set of tracks, each driving one node property (translation,
rotation or scale) from sampled keyframes. A mixer owns the playing actions
for one model and advances them all by the same dt. The registry holds every
mixer for the lifetime of the scene and is advanced once per frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import numpy as np
from pygame.math import Vector3


@dataclass
class KeyframeTrack:
    node: object
    path: str  # "translation" | "rotation" | "scale"
    times: np.ndarray
    values: np.ndarray  # (len(times), n) or (3 * len(times), n) for CUBICSPLINE
    interpolation: str = "LINEAR"

    def __post_init__(self):
        self.times = np.asarray(self.times, dtype=np.float64).reshape(-1)
        values = np.asarray(self.values, dtype=np.float64)
        self.in_tangents: Optional[np.ndarray] = None
        self.out_tangents: Optional[np.ndarray] = None
        if self.interpolation == "CUBICSPLINE":
            # (in-tangent, value, out-tangent) per key
            keys = values.reshape(len(self.times), 3, -1)
            self.in_tangents = keys[:, 0, :].copy()
            self.out_tangents = keys[:, 2, :].copy()
            values = keys[:, 1, :]
        self.values = values.reshape(len(self.times), -1)

    @property
    def duration(self) -> float:
        return float(self.times[-1]) if len(self.times) else 0.0

    def _hermite(self, i: int, s: float, dt: float) -> np.ndarray:
        s2, s3 = s * s, s * s * s
        return (
            (2 * s3 - 3 * s2 + 1) * self.values[i]
            + (s3 - 2 * s2 + s) * dt * self.out_tangents[i]
            + (-2 * s3 + 3 * s2) * self.values[i + 1]
            + (s3 - s2) * dt * self.in_tangents[i + 1]
        )

    def sample(self, t: float) -> np.ndarray:
        times, values = self.times, self.values
        if len(times) == 1 or t <= times[0]:
            return values[0].copy()
        if t >= times[-1]:
            return values[-1].copy()
        i = int(np.searchsorted(times, t, side="right")) - 1
        if self.interpolation == "STEP":
            return values[i].copy()
        t0, t1 = times[i], times[i + 1]
        alpha = (t - t0) / (t1 - t0) if t1 > t0 else 0.0
        a, b = values[i], values[i + 1]
        if self.interpolation == "CUBICSPLINE":
            v = self._hermite(i, alpha, t1 - t0)
            if self.path == "rotation":
                n = np.linalg.norm(v)
                return v / n if n > 0 else a.copy()
            return v
        if self.path == "rotation":
            # shortest arc, then normalised lerp
            if float(np.dot(a, b)) < 0.0:
                b = -b
            q = a + (b - a) * alpha
            n = np.linalg.norm(q)
            return q / n if n > 0 else a.copy()
        return a + (b - a) * alpha

    def apply(self, t: float) -> None:
        v = self.sample(t)
        if self.path == "translation":
            self.node.position = Vector3(float(v[0]), float(v[1]), float(v[2]))
        elif self.path == "scale":
            self.node.scale = Vector3(float(v[0]), float(v[1]), float(v[2]))
        elif self.path == "rotation":
            self.node.quaternion = (float(v[0]), float(v[1]), float(v[2]), float(v[3]))


@dataclass
class AnimationClip:
    name: str
    tracks: List[KeyframeTrack] = field(default_factory=list)
    duration: Optional[float] = None

    def __post_init__(self):
        if self.duration is None:
            self.duration = max((t.duration for t in self.tracks), default=0.0)


class AnimationAction:
    def __init__(self, clip: AnimationClip) -> None:
        self.clip = clip
        self.time = 0.0
        self.time_scale = 1.0
        self.loop = True
        self.running = False

    def play(self) -> "AnimationAction":
        self.running = True
        return self

    def stop(self) -> "AnimationAction":
        self.running = False
        self.time = 0.0
        return self

    def update(self, dt: float) -> None:
        if not self.running:
            return
        self.time += dt * self.time_scale
        duration = self.clip.duration
        if duration > 0:
            if self.loop:
                self.time %= duration
            elif self.time >= duration:
                self.time = duration
                self.running = False
        for track in self.clip.tracks:
            track.apply(self.time)


class AnimationMixer:
    def __init__(self, root) -> None:
        self.root = root
        self.time = 0.0
        self._actions: List[AnimationAction] = []

    def clip_action(self, clip: AnimationClip) -> AnimationAction:
        for action in self._actions:
            if action.clip is clip:
                return action
        action = AnimationAction(clip)
        self._actions.append(action)
        return action

    @property
    def actions(self) -> List[AnimationAction]:
        return list(self._actions)

    def update(self, dt: float) -> "AnimationMixer":
        self.time += dt
        for action in self._actions:
            action.update(dt)
        return self


class AnimationRegistry:
    """Append-only collection of mixers, all advanced by the same dt."""

    def __init__(self) -> None:
        self._mixers: List[AnimationMixer] = []

    def add(self, mixer: AnimationMixer) -> AnimationMixer:
        self._mixers.append(mixer)
        return mixer

    def update(self, dt: float) -> None:
        for mixer in self._mixers:
            mixer.update(dt)

    def __len__(self) -> int:
        return len(self._mixers)

    def __iter__(self) -> Iterator[AnimationMixer]:
        return iter(self._mixers)
