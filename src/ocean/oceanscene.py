"""Ocean scene: sky, water, lights, loaded models and the per-frame loop.

OceanScene is the application context. It owns the camera and its
controllers, the sun parameters, the animation mixers, the background loader
and the GUI; the engine only pumps window events into `input_queue` and calls
frame() once per display refresh. Rendering goes through an injected
renderer so the scene itself never needs a GL context.
"""

from __future__ import annotations

from config import *

import math
import time
from typing import Optional

from pygame.math import Vector3

from camera import Camera, CameraController, OrbitController
from core.animation import AnimationRegistry
from core.clock import FrameClock
from core.events import InputQueue, KeyEvent, MouseButtonEvent, MouseMotionEvent, MouseWheelEvent, ResizeEvent
from core.scene import AmbientLight, DirectionalLight, Scene
from loaders.asset_loader import AssetLoader
from ocean.placement import AssetPlacer, ModelPlacement
from ocean.sun import AZIMUTH_RANGE, ELEVATION_RANGE, SunParameters, sun_direction
from render.environment import EnvironmentBaker
from render.sky import Sky
from render.water import Water
from textures.resoucepath import *
from ui.gui_panel import GuiPanel

ISLAND_POSITIONS = [(-10000, -50, -50), (5900, -50, -50), (-15000, -50, -50)]


class OceanScene(Scene):
    def __init__(
        self,
        renderer,
        *,
        loader: Optional[AssetLoader] = None,
        clock: Optional[FrameClock] = None,
        width: int = WIDTH,
        height: int = HEIGHT,
        load_assets: bool = True,
        enable_timing: bool = False,
    ):
        super().__init__()
        self.renderer = renderer
        self.enable_timing = enable_timing
        self.clock = clock or FrameClock()
        self.input_queue = InputQueue()
        self.frame_count = 0
        self._mouse_pos = (0, 0)

        t0 = time.perf_counter()
        self.camera = Camera(
            position=Vector3(CAMERA_START),
            fov=FOV,
            aspect=width / max(1, height),
            near=NEAR,
            far=FAR,
        )
        self.orbit = OrbitController(
            self.camera,
            target=ORBIT_TARGET,
            min_distance=ORBIT_MIN_DISTANCE,
            max_distance=ORBIT_MAX_DISTANCE,
            max_polar_angle=ORBIT_MAX_POLAR_ANGLE,
            rotate_speed=ORBIT_ROTATE_SPEED,
            zoom_speed=ORBIT_ZOOM_SPEED,
            viewport_height=height,
        )
        self.orbit.update()
        self.camera_controller = CameraController(self.camera, speed=MOVE_SPEED)

        self.water = self.add(Water())
        self.sky = self.add(Sky())
        self.ambient_light = self.add(AmbientLight(intensity=AMBIENT_LIGHT_INTENSITY))
        self.sun_light = self.add(
            DirectionalLight(
                intensity=DIRECTIONAL_LIGHT_INTENSITY,
                position=Vector3(DIRECTIONAL_LIGHT_POSITION),
            )
        )
        self.log_timing("Scene objects", t0, time.perf_counter(), log=self.enable_timing)

        t0 = time.perf_counter()
        self.sun = SunParameters()
        self.baker = EnvironmentBaker(ENV_MAP_WIDTH, ENV_MAP_HEIGHT, blur_passes=ENV_BLUR_PASSES)
        self.update_sun()
        self.log_timing("Environment bake", t0, time.perf_counter(), log=self.enable_timing)

        self.gui = GuiPanel(width)
        self.gui.add(self.sun, "elevation", *ELEVATION_RANGE, on_change=lambda _: self.update_sun())
        self.gui.add(self.sun, "azimuth", *AZIMUTH_RANGE, on_change=lambda _: self.update_sun())

        self.mixers = AnimationRegistry()
        self.placer = AssetPlacer(self, self.mixers)
        self.loader = loader
        if load_assets:
            if self.loader is None:
                self.loader = AssetLoader()
            self._load_assets()

    # ------------------------------------------------------------------
    def update_sun(self) -> Vector3:
        """Recompute the sun vector from the GUI parameters and rebake the environment."""
        sun = sun_direction(self.sun.elevation, self.sun.azimuth)
        self.sky.uniforms["sunPosition"] = Vector3(sun)
        self.water.uniforms["sunDirection"] = sun.normalize()
        if self.environment is not None:
            self.environment.dispose()
        self.environment = self.baker.from_sky(self.sky)
        return sun

    def _add_submarine_controls(self, node) -> None:
        folder = self.gui.add_folder("Submarine Position")
        folder.add(node.position, "x", -1000, 1000, name="Move X")
        folder.add(node.position, "y", -1000, 1000, name="Move Y")
        folder.add(node.position, "z", -1000, 10000, name="Move Z")
        folder.add(node.rotation, "x", 0, math.pi * 2, name="Rotate X")
        folder.add(node.rotation, "y", 0, math.pi * 2, name="Rotate Y")
        folder.add(node.rotation, "z", 0, math.pi * 2, name="Rotate Z")
        folder.open()

    def _load_assets(self) -> None:
        self.placer.place(
            self.loader.load_gltf(SUBMARINE_MODEL_PATH),
            ModelPlacement(
                "submarine",
                position=(100, -150, 8500),
                scale=3,
                on_placed=self._add_submarine_controls,
            ),
        )
        for i, position in enumerate(ISLAND_POSITIONS):
            self.placer.place(
                self.loader.load_obj(ISLAND_MODEL_PATH, ISLAND_MATERIAL_PATH),
                ModelPlacement(f"island_{i}", position=position, scale=10),
            )
        self.placer.place(
            self.loader.load_gltf(BIRDS_MODEL_PATH),
            ModelPlacement("birds", position=(0, 1500, 0), scale=500),
        )

    # ------------------------------------------------------------------
    def handle_event(self, event) -> None:
        if isinstance(event, KeyEvent):
            self.camera_controller.handle_key(event.key, event.pressed)
        elif isinstance(event, ResizeEvent):
            self.camera.aspect = event.width / max(1, event.height)
            self.camera.update_projection_matrix()
            self.orbit.viewport_height = event.height
            self.renderer.set_size(event.width, event.height)
            self.gui.set_viewport(event.width, event.height)
        elif isinstance(event, MouseButtonEvent):
            self._mouse_pos = event.pos
            consumed = self.gui.handle_mouse_button(event.pos, event.button, event.pressed)
            # a release always ends an orbit drag, even over the panel
            if not event.pressed or not consumed:
                self.orbit.on_mouse_button(event.button, event.pressed)
        elif isinstance(event, MouseMotionEvent):
            self._mouse_pos = event.pos
            if not self.gui.handle_mouse_motion(event.pos):
                self.orbit.on_mouse_motion(*event.rel)
        elif isinstance(event, MouseWheelEvent):
            # wheel events carry no position; use the last known cursor
            if not self.gui.contains(self._mouse_pos):
                self.orbit.on_mouse_wheel(event.y)

    def frame(self) -> None:
        # between-frame work: finished loads, then queued input
        self.placer.poll()
        for event in self.input_queue.drain():
            self.handle_event(event)

        delta = self.clock.get_delta()
        self.camera_controller.update(delta)
        self.mixers.update(delta)
        self.water.advance(WATER_TIME_STEP)

        self.renderer.render(self, self.camera)
        self.renderer.draw_gui(self.gui)
        self.frame_count += 1

    def close(self) -> None:
        if self.loader is not None:
            self.loader.shutdown(cancel_futures=True)
            self.loader = None
        if self.environment is not None:
            self.environment.dispose()
            self.environment = None

    def log_timing(self, message: str, start_time: float, end_time: float, log: bool = False):
        """Logs timing information for OceanScene setup phases."""
        if log:
            print(f"{message} took {end_time - start_time:.6f} seconds")
