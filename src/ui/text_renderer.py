"""Screen-space text for the GUI overlay, rendered with pygame.font.

Each label key owns one GL texture that is re-uploaded only when its text
changes, so per-frame GUI drawing costs one textured quad per label.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import pygame
from OpenGL.GL import (
    glGenTextures,
    glBindTexture,
    glTexImage2D,
    glTexParameteri,
    glPushMatrix,
    glPopMatrix,
    glBegin,
    glEnd,
    glOrtho,
    glLoadIdentity,
    glTexCoord2f,
    glVertex2f,
    glColor4f,
    glBlendFunc,
    glEnable,
    glDisable,
    glMatrixMode,
    GL_TEXTURE_2D,
    GL_TEXTURE_MIN_FILTER,
    GL_TEXTURE_MAG_FILTER,
    GL_LINEAR,
    GL_RGBA,
    GL_UNSIGNED_BYTE,
    GL_BLEND,
    GL_SRC_ALPHA,
    GL_ONE_MINUS_SRC_ALPHA,
    GL_PROJECTION,
    GL_MODELVIEW,
    GL_QUADS,
    GL_DEPTH_TEST,
    GL_LIGHTING,
)

Color = Tuple[int, int, int, int]


@dataclass
class _Label:
    texture: int
    size: Tuple[int, int] = (0, 0)
    text: Optional[str] = None
    color: Optional[Color] = None


class TextRenderer:
    """Call begin() before drawing labels and end() afterwards."""

    def __init__(self, width: int, height: int, size: int = 18) -> None:
        self.width = width
        self.height = height
        self.size = size
        self._font: Optional[pygame.font.Font] = None
        self._labels: Dict[str, _Label] = {}
        self._active = False

    @property
    def font(self) -> pygame.font.Font:
        # created on first use so pygame.font can be initialised after us
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, self.size)
        return self._font

    def begin(self) -> None:  # pragma: no cover - visual
        if self._active:
            return
        glMatrixMode(GL_PROJECTION)
        glPushMatrix()
        glLoadIdentity()
        glOrtho(0, self.width, self.height, 0, -1, 1)
        glMatrixMode(GL_MODELVIEW)
        glPushMatrix()
        glLoadIdentity()
        glDisable(GL_LIGHTING)
        glDisable(GL_DEPTH_TEST)
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glEnable(GL_TEXTURE_2D)
        self._active = True

    def end(self) -> None:  # pragma: no cover - visual
        if not self._active:
            return
        glDisable(GL_TEXTURE_2D)
        glDisable(GL_BLEND)
        glEnable(GL_DEPTH_TEST)
        glPopMatrix()
        glMatrixMode(GL_PROJECTION)
        glPopMatrix()
        glMatrixMode(GL_MODELVIEW)
        self._active = False

    def _label(self, key: str, text: str, color: Color) -> _Label:  # pragma: no cover - visual
        label = self._labels.get(key)
        if label is None:
            label = _Label(texture=glGenTextures(1))
            self._labels[key] = label
        if label.text != text or label.color != color:
            surf = self.font.render(text, True, color)
            data = pygame.image.tostring(surf, "RGBA", True)
            w, h = surf.get_size()
            glBindTexture(GL_TEXTURE_2D, label.texture)
            glTexImage2D(GL_TEXTURE_2D, 0, GL_RGBA, w, h, 0, GL_RGBA, GL_UNSIGNED_BYTE, data)
            glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
            glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
            label.size, label.text, label.color = (w, h), text, color
        return label

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color = (235, 235, 235, 255),
        *,
        key: str,
        align: str = "topleft",
    ) -> Tuple[int, int]:  # pragma: no cover - visual
        """Draw one line at screen coords; align is 'topleft' or 'topright'."""
        label = self._label(key, text, color)
        w, h = label.size
        if align == "topright":
            x -= w

        glBindTexture(GL_TEXTURE_2D, label.texture)
        glColor4f(1.0, 1.0, 1.0, 1.0)
        glBegin(GL_QUADS)
        # surface rows were flipped on upload
        glTexCoord2f(0.0, 1.0)
        glVertex2f(x, y)
        glTexCoord2f(1.0, 1.0)
        glVertex2f(x + w, y)
        glTexCoord2f(1.0, 0.0)
        glVertex2f(x + w, y + h)
        glTexCoord2f(0.0, 0.0)
        glVertex2f(x, y + h)
        glEnd()
        return w, h
