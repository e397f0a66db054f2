"""Scene renderer for the fixed-function pipeline plus GLSL sky/water.

Draw order per frame: clear, camera matrices, sky (depth off), lights,
water, then every other node depth first with its local transform pushed on
the modelview stack. The GUI overlay is drawn afterwards in screen space.
"""

from __future__ import annotations

from OpenGL.GL import (
    glClear,
    glClearColor,
    glViewport,
    glMatrixMode,
    glLoadMatrixf,
    glPushMatrix,
    glPopMatrix,
    glMultMatrixf,
    glEnable,
    glDisable,
    glLightfv,
    glLightModelfv,
    glColorMaterial,
    GL_COLOR_BUFFER_BIT,
    GL_DEPTH_BUFFER_BIT,
    GL_PROJECTION,
    GL_MODELVIEW,
    GL_LIGHTING,
    GL_LIGHT0,
    GL_POSITION,
    GL_DIFFUSE,
    GL_SPECULAR,
    GL_AMBIENT,
    GL_LIGHT_MODEL_AMBIENT,
    GL_COLOR_MATERIAL,
    GL_FRONT_AND_BACK,
    GL_AMBIENT_AND_DIFFUSE,
    GL_NORMALIZE,
)
import numpy as np

from config import CLEAR_COLOR
from core.scene import AmbientLight, DirectionalLight
from render.sky import Sky
from render.water import Water
from ui.text_renderer import TextRenderer


def _gl_matrix(m: np.ndarray) -> np.ndarray:
    # numpy is row-major with column vectors; GL wants column-major
    return np.ascontiguousarray(m.T, dtype=np.float32)


class Renderer:
    def __init__(self, width: int, height: int) -> None:
        self.width = 0
        self.height = 0
        self.text = TextRenderer(width, height)
        self.set_size(width, height)
        glClearColor(*CLEAR_COLOR)

    def set_size(self, width: int, height: int) -> None:
        width, height = max(1, int(width)), max(1, int(height))
        self.width, self.height = width, height
        glViewport(0, 0, width, height)
        self.text.width, self.text.height = width, height

    # ------------------------------------------------------------------
    def _apply_lights(self, scene) -> None:
        ambient = np.zeros(3)
        directional = None
        for light in scene.lights():
            if isinstance(light, AmbientLight):
                ambient += np.array(light.color) * light.intensity
            elif isinstance(light, DirectionalLight) and directional is None:
                directional = light
        if scene.environment is not None:
            ambient += np.array(scene.environment.irradiance)

        glEnable(GL_LIGHTING)
        glEnable(GL_NORMALIZE)
        glEnable(GL_COLOR_MATERIAL)
        glColorMaterial(GL_FRONT_AND_BACK, GL_AMBIENT_AND_DIFFUSE)
        glLightModelfv(GL_LIGHT_MODEL_AMBIENT, (*np.clip(ambient, 0.0, 1.0), 1.0))
        if directional is not None:
            p = directional.position
            c = np.array(directional.color) * directional.intensity
            glEnable(GL_LIGHT0)
            glLightfv(GL_LIGHT0, GL_POSITION, (p.x, p.y, p.z, 0.0))
            glLightfv(GL_LIGHT0, GL_DIFFUSE, (*c, 1.0))
            glLightfv(GL_LIGHT0, GL_SPECULAR, (*c, 1.0))
            glLightfv(GL_LIGHT0, GL_AMBIENT, (0.0, 0.0, 0.0, 1.0))
        else:
            glDisable(GL_LIGHT0)

    def _draw_node(self, node, camera) -> None:
        if not node.visible:
            return
        glPushMatrix()
        glMultMatrixf(_gl_matrix(node.matrix()))
        node.draw(camera)
        for child in node.children:
            self._draw_node(child, camera)
        glPopMatrix()

    # ------------------------------------------------------------------
    def render(self, scene, camera) -> None:
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        glMatrixMode(GL_PROJECTION)
        glLoadMatrixf(_gl_matrix(camera.projection_matrix))
        glMatrixMode(GL_MODELVIEW)
        glLoadMatrixf(_gl_matrix(camera.view_matrix()))

        others = []
        for node in scene.children:
            if isinstance(node, Sky) and node.visible:
                node.draw(camera)
            elif not isinstance(node, (AmbientLight, DirectionalLight, Water)):
                others.append(node)

        for node in scene.children:
            if isinstance(node, Water) and node.visible:
                node.draw(camera, scene.environment)

        self._apply_lights(scene)
        for node in others:
            self._draw_node(node, camera)
        glDisable(GL_LIGHTING)

    def draw_gui(self, gui) -> None:
        self.text.begin()
        gui.draw(self.text)
        self.text.end()
