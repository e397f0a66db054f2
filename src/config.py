import math

WIDTH = 1600
HEIGHT = 900
FULLSCREEN = False
FPS = 60
VSYNC = True
CLEAR_COLOR = (0.0, 0.0, 0.0, 1.0)
# Camera projection
FOV = 60
NEAR = 1.0
FAR = 20000.0
CAMERA_START = (0, 200, 1000000)
# Orbit controls
ORBIT_TARGET = (0, 10, 8900)
ORBIT_MIN_DISTANCE = 40.0
ORBIT_MAX_DISTANCE = 200.0
ORBIT_MAX_POLAR_ANGLE = math.pi * 0.495
ORBIT_ROTATE_SPEED = 1.0
ORBIT_ZOOM_SPEED = 1.0
# Keyboard movement, world units per second
MOVE_SPEED = 10.0
# Water shader time advances per frame, not per second
WATER_TIME_STEP = 1.0 / 60.0
WATER_SIZE = 100000.0
WATER_NORMAL_REPEAT = 4
WATER_SUN_COLOR = 0xFFFFFF
WATER_COLOR = 0x001E0F
WATER_DISTORTION_SCALE = 3.7
# Sun defaults (degrees)
SUN_ELEVATION = 2.0
SUN_AZIMUTH = 180.0
# Sky (Preetham model)
SKY_TURBIDITY = 10.0
SKY_RAYLEIGH = 2.0
SKY_MIE_COEFFICIENT = 0.005
SKY_MIE_DIRECTIONAL_G = 0.8
TONE_MAPPING_EXPOSURE = 0.5
# Lights
AMBIENT_LIGHT_INTENSITY = 1.0
DIRECTIONAL_LIGHT_INTENSITY = 0.5
DIRECTIONAL_LIGHT_POSITION = (1.0, 0.0, 2.0)
# Environment map baked from the sky
ENV_MAP_WIDTH = 64
ENV_MAP_HEIGHT = 32
ENV_BLUR_PASSES = 2
# Background model loading
LOADER_WORKERS = 4
