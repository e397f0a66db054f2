"""Window, GL state and the main loop.

The engine owns pygame and the display; everything else belongs to the
scene. Window events are converted and queued, never handled directly, so the
scene sees them at one fixed point at the start of its next frame.
"""

from __future__ import annotations

import time

import pygame
from OpenGL.GL import (
    glEnable,
    glDisable,
    glDepthFunc,
    GL_DEPTH_TEST,
    GL_LEQUAL,
    GL_CULL_FACE,
)

from config import *
from core.renderer import Renderer
from ocean.oceanscene import OceanScene


class Engine:
    def __init__(self, enable_timing: bool = False):
        pygame.init()
        pygame.display.gl_set_attribute(pygame.GL_DEPTH_SIZE, 24)
        pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLEBUFFERS, 1)
        pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLESAMPLES, 4)
        pygame.display.set_caption("Ocean")
        flags = pygame.DOUBLEBUF | pygame.OPENGL | pygame.RESIZABLE
        if FULLSCREEN:
            flags |= pygame.FULLSCREEN
        try:
            # vsync: 1 to enable, 0 to disable
            pygame.display.set_mode((WIDTH, HEIGHT), flags, vsync=(1 if VSYNC else 0))
        except pygame.error:
            # vsync was requested but is unavailable on this driver
            pygame.display.set_mode((WIDTH, HEIGHT), flags)
        self.clock = pygame.time.Clock()

        # GL state
        glEnable(GL_DEPTH_TEST)
        glDepthFunc(GL_LEQUAL)
        glDisable(GL_CULL_FACE)

        t0 = time.perf_counter()
        self.renderer = Renderer(WIDTH, HEIGHT)
        self.scene = OceanScene(self.renderer, width=WIDTH, height=HEIGHT, enable_timing=enable_timing)
        self.scene.log_timing("Scene setup", t0, time.perf_counter(), log=enable_timing)

    # ------------------------------------------------------------------
    def handle_events(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
            self.scene.input_queue.push_pygame(event)
        return True

    # ------------------------------------------------------------------
    def run(self):  # pragma: no cover - visual
        running = True
        try:
            while running:
                running = self.handle_events()
                if not running:
                    break
                self.scene.frame()
                pygame.display.flip()
                self.clock.tick(FPS)
        finally:
            self.scene.close()
            pygame.quit()
