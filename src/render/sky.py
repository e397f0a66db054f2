"""Analytic daylight sky (Preetham model).

The sky is drawn as a camera-centred cube with depth testing off, so it is
always behind everything else. The same scattering model is implemented in
numpy (`sky_radiance`) so the environment baker can sample the sky on the
CPU whenever the sun moves.
"""

from __future__ import annotations

import math

import numpy as np
from pygame.math import Vector3

from config import (
    SKY_TURBIDITY,
    SKY_RAYLEIGH,
    SKY_MIE_COEFFICIENT,
    SKY_MIE_DIRECTIONAL_G,
    TONE_MAPPING_EXPOSURE,
)
from core.object3d import Object3D
from render.shaders import ACES_GLSL, ShaderProgram

# Scattering constants
TOTAL_RAYLEIGH = np.array([5.804542996261093e-6, 1.3562911419845635e-5, 3.0265902468824876e-5])
MIE_CONST = np.array([1.8399918514433978e14, 2.7798023919660528e14, 4.0790479543861094e14])
CUTOFF_ANGLE = 1.6110731556870734
STEEPNESS = 1.5
EE = 1000.0
RAYLEIGH_ZENITH_LENGTH = 8.4e3
MIE_ZENITH_LENGTH = 1.25e3
SUN_ANGULAR_DIAMETER_COS = 0.999956676946448443553574619906976478926848692873900859324
THREE_OVER_SIXTEENPI = 0.05968310365946075
ONE_OVER_FOURPI = 0.07957747154594767


SKY_VERTEX = """
#version 120
uniform vec3 sunPosition;
uniform float rayleigh;
uniform float turbidity;
uniform float mieCoefficient;
uniform vec3 up;

varying vec3 vDirection;
varying vec3 vSunDirection;
varying float vSunfade;
varying vec3 vBetaR;
varying vec3 vBetaM;
varying float vSunE;

const float e = 2.71828182845904523536;
const vec3 totalRayleigh = vec3(5.804542996261093E-6, 1.3562911419845635E-5, 3.0265902468824876E-5);
const vec3 MieConst = vec3(1.8399918514433978E14, 2.7798023919660528E14, 4.0790479543861094E14);
const float cutoffAngle = 1.6110731556870734;
const float steepness = 1.5;
const float EE = 1000.0;

float sunIntensity(float zenithAngleCos) {
    zenithAngleCos = clamp(zenithAngleCos, -1.0, 1.0);
    return EE * max(0.0, 1.0 - pow(e, -((cutoffAngle - acos(zenithAngleCos)) / steepness)));
}

vec3 totalMie(float T) {
    float c = (0.2 * T) * 10E-18;
    return 0.434 * c * MieConst;
}

void main() {
    vDirection = gl_Vertex.xyz;
    gl_Position = gl_ModelViewProjectionMatrix * gl_Vertex;

    vSunDirection = normalize(sunPosition);
    vSunE = sunIntensity(dot(vSunDirection, up));
    vSunfade = 1.0 - clamp(1.0 - exp(sunPosition.y / 450000.0), 0.0, 1.0);
    float rayleighCoefficient = rayleigh - (1.0 * (1.0 - vSunfade));
    vBetaR = totalRayleigh * rayleighCoefficient;
    vBetaM = totalMie(turbidity) * mieCoefficient;
}
"""

SKY_FRAGMENT = """
#version 120
uniform float mieDirectionalG;
uniform vec3 up;
uniform float exposure;

varying vec3 vDirection;
varying vec3 vSunDirection;
varying float vSunfade;
varying vec3 vBetaR;
varying vec3 vBetaM;
varying float vSunE;

const float pi = 3.141592653589793;
const float rayleighZenithLength = 8.4E3;
const float mieZenithLength = 1.25E3;
const float sunAngularDiameterCos = 0.999956676946448443553574619906976478926848692873900859324;
const float THREE_OVER_SIXTEENPI = 0.05968310365946075;
const float ONE_OVER_FOURPI = 0.07957747154594767;

float rayleighPhase(float cosTheta) {
    return THREE_OVER_SIXTEENPI * (1.0 + pow(cosTheta, 2.0));
}

float hgPhase(float cosTheta, float g) {
    float g2 = pow(g, 2.0);
    float inverse = 1.0 / pow(1.0 - 2.0 * g * cosTheta + g2, 1.5);
    return ONE_OVER_FOURPI * ((1.0 - g2) * inverse);
}
""" + ACES_GLSL + """
void main() {
    vec3 direction = normalize(vDirection);

    float zenithAngle = acos(max(0.0, dot(up, direction)));
    float inverse = 1.0 / (cos(zenithAngle) + 0.15 * pow(93.885 - ((zenithAngle * 180.0) / pi), -1.253));
    float sR = rayleighZenithLength * inverse;
    float sM = mieZenithLength * inverse;

    vec3 Fex = exp(-(vBetaR * sR + vBetaM * sM));

    float cosTheta = dot(direction, vSunDirection);
    float rPhase = rayleighPhase(cosTheta * 0.5 + 0.5);
    vec3 betaRTheta = vBetaR * rPhase;
    float mPhase = hgPhase(cosTheta, mieDirectionalG);
    vec3 betaMTheta = vBetaM * mPhase;

    vec3 Lin = pow(vSunE * ((betaRTheta + betaMTheta) / (vBetaR + vBetaM)) * (1.0 - Fex), vec3(1.5));
    Lin *= mix(vec3(1.0),
               pow(vSunE * ((betaRTheta + betaMTheta) / (vBetaR + vBetaM)) * Fex, vec3(1.0 / 2.0)),
               clamp(pow(1.0 - dot(up, vSunDirection), 5.0), 0.0, 1.0));

    vec3 L0 = vec3(0.1) * Fex;
    float sundisk = smoothstep(sunAngularDiameterCos, sunAngularDiameterCos + 0.00002, cosTheta);
    L0 += (vSunE * 19000.0 * Fex) * sundisk;

    vec3 texColor = (Lin + L0) * 0.04 + vec3(0.0, 0.0003, 0.00075);
    vec3 retColor = pow(texColor, vec3(1.0 / (1.2 + (1.2 * vSunfade))));

    gl_FragColor = vec4(linearToSRGB(ACESFilmicToneMapping(retColor, exposure)), 1.0);
}
"""


def _sun_intensity(zenith_angle_cos: float) -> float:
    zenith_angle_cos = max(-1.0, min(1.0, zenith_angle_cos))
    return EE * max(0.0, 1.0 - math.exp(-((CUTOFF_ANGLE - math.acos(zenith_angle_cos)) / STEEPNESS)))


def sky_radiance(directions: np.ndarray, uniforms: dict) -> np.ndarray:
    """Linear sky colour for each unit direction in an (N, 3) array.

    Mirrors SKY_VERTEX/SKY_FRAGMENT before tone mapping.
    """
    directions = np.asarray(directions, dtype=np.float64).reshape(-1, 3)
    norms = np.linalg.norm(directions, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    directions = directions / norms

    sun_pos = np.array(tuple(uniforms["sunPosition"]), dtype=np.float64)
    up = np.array(tuple(uniforms["up"]), dtype=np.float64)
    sun_len = np.linalg.norm(sun_pos)
    sun_dir = sun_pos / sun_len if sun_len > 0 else up

    sun_e = _sun_intensity(float(np.dot(sun_dir, up)))
    sunfade = 1.0 - min(max(1.0 - math.exp(sun_pos[1] / 450000.0), 0.0), 1.0)
    rayleigh_coefficient = float(uniforms["rayleigh"]) - (1.0 - sunfade)
    beta_r = TOTAL_RAYLEIGH * rayleigh_coefficient
    c = (0.2 * float(uniforms["turbidity"])) * 10e-18
    beta_m = 0.434 * c * MIE_CONST * float(uniforms["mieCoefficient"])

    zenith_angle = np.arccos(np.maximum(0.0, directions @ up))
    inverse = 1.0 / (
        np.cos(zenith_angle) + 0.15 * np.power(93.885 - (zenith_angle * 180.0 / math.pi), -1.253)
    )
    s_r = (RAYLEIGH_ZENITH_LENGTH * inverse)[:, None]
    s_m = (MIE_ZENITH_LENGTH * inverse)[:, None]
    fex = np.exp(-(beta_r * s_r + beta_m * s_m))

    cos_theta = directions @ sun_dir
    r_phase = THREE_OVER_SIXTEENPI * (1.0 + (cos_theta * 0.5 + 0.5) ** 2)
    g = float(uniforms["mieDirectionalG"])
    g2 = g * g
    m_phase = ONE_OVER_FOURPI * ((1.0 - g2) / np.power(1.0 - 2.0 * g * cos_theta + g2, 1.5))
    ratio = (beta_r * r_phase[:, None] + beta_m * m_phase[:, None]) / (beta_r + beta_m)

    lin = np.power(sun_e * ratio * (1.0 - fex), 1.5)
    blend = min(max((1.0 - float(np.dot(up, sun_dir))) ** 5.0, 0.0), 1.0)
    lin *= (1.0 - blend) + blend * np.sqrt(sun_e * ratio * fex)

    l0 = 0.1 * fex
    t = np.clip((cos_theta - SUN_ANGULAR_DIAMETER_COS) / 0.00002, 0.0, 1.0)
    sundisk = t * t * (3.0 - 2.0 * t)
    l0 += (sun_e * 19000.0 * fex) * sundisk[:, None]

    tex_color = (lin + l0) * 0.04 + np.array([0.0, 0.0003, 0.00075])
    return np.power(tex_color, 1.0 / (1.2 + 1.2 * sunfade))


def aces_filmic(color: np.ndarray, exposure: float = TONE_MAPPING_EXPOSURE) -> np.ndarray:
    """numpy twin of ACESFilmicToneMapping in ACES_GLSL (rows are colours)."""
    aces_input = np.array(
        [[0.59719, 0.35458, 0.04823], [0.07600, 0.90834, 0.01566], [0.02840, 0.13383, 0.83777]]
    )
    aces_output = np.array(
        [[1.60475, -0.53108, -0.07367], [-0.10208, 1.10813, -0.00605], [-0.00327, -0.07276, 1.07602]]
    )
    v = np.asarray(color, dtype=np.float64) * (exposure / 0.6)
    v = v @ aces_input.T
    a = v * (v + 0.0245786) - 0.000090537
    b = v * (0.983729 * v + 0.4329510) + 0.238081
    v = (a / b) @ aces_output.T
    return np.clip(v, 0.0, 1.0)


class Sky(Object3D):
    def __init__(self) -> None:
        super().__init__(name="sky")
        self.uniforms = {
            "turbidity": SKY_TURBIDITY,
            "rayleigh": SKY_RAYLEIGH,
            "mieCoefficient": SKY_MIE_COEFFICIENT,
            "mieDirectionalG": SKY_MIE_DIRECTIONAL_G,
            "sunPosition": Vector3(0, 0, 0),
            "up": Vector3(0, 1, 0),
            "exposure": TONE_MAPPING_EXPOSURE,
        }
        self._program = ShaderProgram(SKY_VERTEX, SKY_FRAGMENT)

    def radiance(self, directions: np.ndarray) -> np.ndarray:
        return sky_radiance(directions, self.uniforms)

    def draw(self, camera) -> None:  # pragma: no cover - visual
        from OpenGL.GL import (
            glBegin,
            glEnd,
            glVertex3f,
            glDisable,
            glEnable,
            glDepthMask,
            glPushMatrix,
            glPopMatrix,
            glTranslatef,
            GL_QUADS,
            GL_DEPTH_TEST,
            GL_LIGHTING,
        )

        # Centre the cube on the camera so only its orientation matters.
        half = max(camera.near * 4.0, 10.0)
        p = camera.position

        glDisable(GL_DEPTH_TEST)
        glDisable(GL_LIGHTING)
        glDepthMask(False)
        glPushMatrix()
        glTranslatef(p.x, p.y, p.z)
        self._program.use(self.uniforms)
        glBegin(GL_QUADS)
        for face in _CUBE_FACES:
            for x, y, z in face:
                glVertex3f(x * half, y * half, z * half)
        glEnd()
        ShaderProgram.release()
        glPopMatrix()
        glDepthMask(True)
        glEnable(GL_DEPTH_TEST)


_CUBE_FACES = (
    ((-1, -1, 1), (1, -1, 1), (1, 1, 1), (-1, 1, 1)),
    ((1, -1, -1), (-1, -1, -1), (-1, 1, -1), (1, 1, -1)),
    ((-1, -1, -1), (-1, -1, 1), (-1, 1, 1), (-1, 1, -1)),
    ((1, -1, 1), (1, -1, -1), (1, 1, -1), (1, 1, 1)),
    ((-1, 1, 1), (1, 1, 1), (1, 1, -1), (-1, 1, -1)),
    ((-1, -1, -1), (1, -1, -1), (1, -1, 1), (-1, -1, 1)),
)
