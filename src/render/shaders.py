"""GLSL program wrapper with a uniform dictionary.

Objects keep their uniforms in a plain dict (name -> value) so game code can
read and write them without a GL context; ShaderProgram.use() compiles on
first call and uploads the dict. Values may be floats, ints, Vector3,
3/4-tuples, or ("sampler", unit) pairs for textures bound by the caller.
"""

from __future__ import annotations

from typing import Dict, Optional


ACES_GLSL = """
vec3 RRTAndODTFit(vec3 v) {
    vec3 a = v * (v + 0.0245786) - 0.000090537;
    vec3 b = v * (0.983729 * v + 0.4329510) + 0.238081;
    return a / b;
}
vec3 ACESFilmicToneMapping(vec3 color, float exposure) {
    const mat3 ACESInputMat = mat3(
        vec3(0.59719, 0.07600, 0.02840),
        vec3(0.35458, 0.90834, 0.13383),
        vec3(0.04823, 0.01566, 0.83777));
    const mat3 ACESOutputMat = mat3(
        vec3( 1.60475, -0.10208, -0.00327),
        vec3(-0.53108,  1.10813, -0.07276),
        vec3(-0.07367, -0.00605,  1.07602));
    color *= exposure / 0.6;
    color = ACESInputMat * color;
    color = RRTAndODTFit(color);
    color = ACESOutputMat * color;
    return clamp(color, 0.0, 1.0);
}
vec3 linearToSRGB(vec3 c) {
    return pow(c, vec3(1.0 / 2.2));
}
"""


class ShaderProgram:
    def __init__(self, vertex_source: str, fragment_source: str) -> None:
        self.vertex_source = vertex_source
        self.fragment_source = fragment_source
        self._program: Optional[int] = None
        self._locations: Dict[str, int] = {}

    def _compile(self) -> None:  # pragma: no cover - visual
        import OpenGL.GL.shaders as gls
        from OpenGL.GL import GL_VERTEX_SHADER, GL_FRAGMENT_SHADER

        self._program = gls.compileProgram(
            gls.compileShader(self.vertex_source, GL_VERTEX_SHADER),
            gls.compileShader(self.fragment_source, GL_FRAGMENT_SHADER),
        )

    def _location(self, name: str) -> int:  # pragma: no cover - visual
        from OpenGL.GL import glGetUniformLocation

        loc = self._locations.get(name)
        if loc is None:
            loc = glGetUniformLocation(self._program, name)
            self._locations[name] = loc
        return loc

    def use(self, uniforms: Dict[str, object]) -> None:  # pragma: no cover - visual
        from OpenGL.GL import glUseProgram, glUniform1f, glUniform1i, glUniform3f, glUniform4f

        if self._program is None:
            self._compile()
        glUseProgram(self._program)
        for name, value in uniforms.items():
            loc = self._location(name)
            if loc < 0:
                continue
            if isinstance(value, tuple) and len(value) == 2 and value[0] == "sampler":
                glUniform1i(loc, int(value[1]))
            elif isinstance(value, bool):
                glUniform1i(loc, int(value))
            elif isinstance(value, (int, float)):
                glUniform1f(loc, float(value))
            elif len(value) == 3:
                glUniform3f(loc, float(value[0]), float(value[1]), float(value[2]))
            elif len(value) == 4:
                glUniform4f(loc, *(float(v) for v in value))

    @staticmethod
    def release() -> None:  # pragma: no cover - visual
        from OpenGL.GL import glUseProgram

        glUseProgram(0)


def hex_to_rgb(color: int) -> tuple[float, float, float]:
    return (
        ((color >> 16) & 0xFF) / 255.0,
        ((color >> 8) & 0xFF) / 255.0,
        (color & 0xFF) / 255.0,
    )
