"""Animated ocean surface.

A large horizontal plane lit by the sun. Four scrolling samples of a tiling
normal map make the waves; reflections come from the baked environment map
instead of a mirror render pass. The `time` uniform is advanced by the frame
loop with a fixed step per frame.
"""

from __future__ import annotations

from typing import Optional

from pygame.math import Vector3

from config import (
    WATER_SIZE,
    WATER_NORMAL_REPEAT,
    WATER_SUN_COLOR,
    WATER_COLOR,
    WATER_DISTORTION_SCALE,
    TONE_MAPPING_EXPOSURE,
)
from core.object3d import Object3D
from render.shaders import ACES_GLSL, ShaderProgram, hex_to_rgb
from textures.resoucepath import WATER_NORMALS_TEXTURE_PATH


WATER_VERTEX = """
#version 120
varying vec3 worldPosition;

void main() {
    worldPosition = gl_Vertex.xyz;
    gl_Position = gl_ModelViewProjectionMatrix * gl_Vertex;
}
"""

WATER_FRAGMENT = """
#version 120
uniform sampler2D normalSampler;
uniform sampler2D envSampler;
uniform float alpha;
uniform float time;
uniform float size;
uniform float distortionScale;
uniform float normalRepeat;
uniform float exposure;
uniform vec3 sunColor;
uniform vec3 sunDirection;
uniform vec3 eye;
uniform vec3 waterColor;

varying vec3 worldPosition;

const float pi = 3.141592653589793;

vec4 getNoise(vec2 uv) {
    vec2 uv0 = (uv / 103.0) + vec2(time / 17.0, time / 29.0);
    vec2 uv1 = uv / 107.0 - vec2(time / -19.0, time / 31.0);
    vec2 uv2 = uv / vec2(8907.0, 9803.0) + vec2(time / 101.0, time / 97.0);
    vec2 uv3 = uv / vec2(1091.0, 1027.0) - vec2(time / 109.0, time / -113.0);
    vec4 noise = texture2D(normalSampler, uv0 * normalRepeat) +
                 texture2D(normalSampler, uv1 * normalRepeat) +
                 texture2D(normalSampler, uv2 * normalRepeat) +
                 texture2D(normalSampler, uv3 * normalRepeat);
    return noise * 0.5 - 1.0;
}

void sunLight(const vec3 surfaceNormal, const vec3 eyeDirection, float shiny, float spec, float diffuse,
              inout vec3 diffuseColor, inout vec3 specularColor) {
    vec3 reflection = normalize(reflect(-sunDirection, surfaceNormal));
    float direction = max(0.0, dot(eyeDirection, reflection));
    specularColor += pow(direction, shiny) * sunColor * spec;
    diffuseColor += max(dot(sunDirection, surfaceNormal), 0.0) * sunColor * diffuse;
}

vec3 sampleEnvironment(vec3 dir) {
    dir = normalize(dir);
    float theta = acos(clamp(dir.y, -1.0, 1.0));
    float phi = atan(dir.z, dir.x);
    vec2 uv = vec2(phi / (2.0 * pi) + 0.5, 1.0 - theta / pi);
    return texture2D(envSampler, uv).rgb;
}
""" + ACES_GLSL + """
void main() {
    vec4 noise = getNoise(worldPosition.xz * size);
    vec3 surfaceNormal = normalize(noise.xzy * vec3(1.5, 1.0, 1.5));

    vec3 diffuseLight = vec3(0.0);
    vec3 specularLight = vec3(0.0);

    vec3 worldToEye = eye - worldPosition;
    vec3 eyeDirection = normalize(worldToEye);
    sunLight(surfaceNormal, eyeDirection, 100.0, 2.0, 0.5, diffuseLight, specularLight);

    float distance = length(worldToEye);
    vec3 distortion = vec3(surfaceNormal.x, 0.0, surfaceNormal.z) * (0.001 + 1.0 / distance) * distortionScale;
    vec3 reflected = reflect(-eyeDirection, surfaceNormal) + distortion;
    reflected.y = abs(reflected.y);
    vec3 reflectionSample = sampleEnvironment(reflected);

    float theta = max(dot(eyeDirection, surfaceNormal), 0.0);
    float rf0 = 0.3;
    float reflectance = rf0 + (1.0 - rf0) * pow((1.0 - theta), 5.0);
    vec3 scatter = max(0.0, dot(surfaceNormal, eyeDirection)) * waterColor;
    vec3 albedo = mix((sunColor * diffuseLight * 0.3 + scatter),
                      (vec3(0.1) + reflectionSample * 0.9 + reflectionSample * specularLight),
                      reflectance);
    gl_FragColor = vec4(linearToSRGB(ACESFilmicToneMapping(albedo, exposure)), alpha);
}
"""


class Water(Object3D):
    def __init__(
        self,
        size: float = WATER_SIZE,
        *,
        normal_map_path: str = WATER_NORMALS_TEXTURE_PATH,
        normal_repeat: float = WATER_NORMAL_REPEAT,
    ) -> None:
        super().__init__(name="water")
        self.size = float(size)
        self.normal_map_path = normal_map_path
        self.uniforms = {
            "time": 0.0,
            "size": 1.0,
            "alpha": 1.0,
            "distortionScale": WATER_DISTORTION_SCALE,
            "normalRepeat": float(normal_repeat),
            "exposure": TONE_MAPPING_EXPOSURE,
            "sunColor": hex_to_rgb(WATER_SUN_COLOR),
            "sunDirection": Vector3(0.70707, 0.70707, 0.0),
            "waterColor": hex_to_rgb(WATER_COLOR),
            "eye": Vector3(0, 0, 0),
            "normalSampler": ("sampler", 0),
            "envSampler": ("sampler", 1),
        }
        self._normal_texture: Optional[int] = None
        self._program = ShaderProgram(WATER_VERTEX, WATER_FRAGMENT)

    @property
    def time(self) -> float:
        return self.uniforms["time"]

    def advance(self, step: float) -> float:
        self.uniforms["time"] += step
        return self.uniforms["time"]

    def draw(self, camera, environment=None) -> None:  # pragma: no cover - visual
        from OpenGL.GL import (
            glActiveTexture,
            glBindTexture,
            glBegin,
            glEnd,
            glVertex3f,
            glDisable,
            glEnable,
            glBlendFunc,
            GL_TEXTURE0,
            GL_TEXTURE1,
            GL_TEXTURE_2D,
            GL_QUADS,
            GL_LIGHTING,
            GL_BLEND,
            GL_SRC_ALPHA,
            GL_ONE_MINUS_SRC_ALPHA,
        )
        from textures.texture_utils import load_texture

        if self._normal_texture is None:
            self._normal_texture = load_texture(self.normal_map_path, repeat=True)

        self.uniforms["eye"] = Vector3(camera.position)
        glDisable(GL_LIGHTING)
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glActiveTexture(GL_TEXTURE0)
        glBindTexture(GL_TEXTURE_2D, self._normal_texture)
        glActiveTexture(GL_TEXTURE1)
        glBindTexture(GL_TEXTURE_2D, environment.texture() if environment is not None else 0)
        glActiveTexture(GL_TEXTURE0)

        self._program.use(self.uniforms)
        half = self.size / 2.0
        y = self.position.y
        glBegin(GL_QUADS)
        glVertex3f(-half, y, half)
        glVertex3f(half, y, half)
        glVertex3f(half, y, -half)
        glVertex3f(-half, y, -half)
        glEnd()
        ShaderProgram.release()

        glActiveTexture(GL_TEXTURE1)
        glBindTexture(GL_TEXTURE_2D, 0)
        glActiveTexture(GL_TEXTURE0)
        glBindTexture(GL_TEXTURE_2D, 0)
        glDisable(GL_BLEND)
