from .camera import Camera
from .cameracontroller import CameraController, MovementState
from .orbit_controller import OrbitController

__all__ = [
    "Camera",
    "CameraController",
    "MovementState",
    "OrbitController",
]
