"""Pre-filtered environment map baked from the sky.

from_sky() evaluates the sky model over an equirectangular grid, tone maps
it, blurs it to approximate a rough-reflection prefilter, and integrates a
cosine-weighted irradiance for the upward hemisphere. The irradiance drives
the ambient term of model lighting; the blurred image is what the water
reflects. Baking is a full recompute every time the sun moves.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from config import ENV_MAP_WIDTH, ENV_MAP_HEIGHT, ENV_BLUR_PASSES, TONE_MAPPING_EXPOSURE
from render.sky import aces_filmic


def equirect_directions(width: int, height: int) -> np.ndarray:
    """Unit directions at pixel centres of an equirect image, shape (H, W, 3).

    Row 0 is straight up; u runs around the horizon from -X through +Z.
    """
    v = (np.arange(height) + 0.5) / height
    u = (np.arange(width) + 0.5) / width
    theta = v * math.pi
    phi = (u - 0.5) * 2.0 * math.pi
    sin_t = np.sin(theta)[:, None]
    x = sin_t * np.cos(phi)[None, :]
    y = np.repeat(np.cos(theta)[:, None], width, axis=1)
    z = sin_t * np.sin(phi)[None, :]
    return np.stack([x, y, z], axis=-1)


def _box_blur(image: np.ndarray, passes: int) -> np.ndarray:
    out = image
    for _ in range(passes):
        # wrap horizontally, clamp vertically
        out = (np.roll(out, 1, axis=1) + out + np.roll(out, -1, axis=1)) / 3.0
        up = np.concatenate([out[:1], out[:-1]], axis=0)
        down = np.concatenate([out[1:], out[-1:]], axis=0)
        out = (up + out + down) / 3.0
    return out


@dataclass
class EnvironmentMap:
    # (H, W, 3) float in [0, 1], display referred
    image: np.ndarray
    irradiance: tuple[float, float, float]
    _texture: Optional[int] = field(default=None, repr=False, compare=False)

    def texture(self) -> int:  # pragma: no cover - visual
        if self._texture is None:
            from textures.texture_utils import upload_image

            self._texture = upload_image((self.image * 255.0 + 0.5).astype(np.uint8), mipmaps=False)
        return self._texture

    def dispose(self) -> None:  # pragma: no cover - visual
        if self._texture is not None:
            from OpenGL.GL import glDeleteTextures

            glDeleteTextures([self._texture])
            self._texture = None


class EnvironmentBaker:
    def __init__(
        self,
        width: int = ENV_MAP_WIDTH,
        height: int = ENV_MAP_HEIGHT,
        *,
        blur_passes: int = ENV_BLUR_PASSES,
        exposure: float = TONE_MAPPING_EXPOSURE,
    ) -> None:
        self.width = int(width)
        self.height = int(height)
        self.blur_passes = int(blur_passes)
        self.exposure = float(exposure)
        self._directions = equirect_directions(self.width, self.height)
        self.bake_count = 0

    def from_sky(self, sky) -> EnvironmentMap:
        dirs = self._directions.reshape(-1, 3)
        radiance = sky.radiance(dirs)
        image = aces_filmic(radiance, self.exposure).reshape(self.height, self.width, 3)
        image = _box_blur(image, self.blur_passes)

        # cosine-weighted upper hemisphere, solid angle ~ sin(theta)
        cos_up = np.clip(self._directions[..., 1], 0.0, None)
        sin_t = np.sqrt(1.0 - self._directions[..., 1] ** 2)
        weights = cos_up * sin_t
        total = float(weights.sum()) or 1.0
        irradiance = (image * weights[..., None]).sum(axis=(0, 1)) / total

        self.bake_count += 1
        return EnvironmentMap(image=image.astype(np.float32), irradiance=tuple(float(c) for c in irradiance))
