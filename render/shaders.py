# render/shaders.py
# ============================================================================
# Gestión de Shaders
# ============================================================================
# Fuentes GLSL del visualizador y compilación/enlazado del programa de GPU.
# ============================================================================

import logging

from OpenGL.GL import *

log = logging.getLogger(__name__)

# Cada vértice lleva su posición y las coordenadas (frecuencia, amplitud)
# con las que el fragment shader consulta el espectro.
VISUALISER_VERT = """
#version 330 core
layout (location = 0) in vec2 a_position;
layout (location = 1) in float a_frequency;
layout (location = 2) in float a_amplitude;

uniform mat4 u_projection;

out float v_frequency;
out float v_amplitude;

void main() {
    v_frequency = a_frequency;
    v_amplitude = a_amplitude;
    gl_Position = u_projection * vec4(a_position, 0.0, 1.0);
}
"""

# Un píxel se enciende si su amplitud queda por debajo del nivel de su banda
VISUALISER_FRAG = """
#version 330 core
in float v_frequency;
in float v_amplitude;

uniform sampler1D u_spectrum;

out vec4 frag_color;

void main() {
    float level = texture(u_spectrum, v_frequency).r;
    float lit = smoothstep(v_amplitude - 0.01, v_amplitude, level);
    vec3 color = mix(vec3(0.1, 0.4, 1.0), vec3(1.0, 0.2, 0.4), v_frequency);
    frag_color = vec4(color * lit, 1.0);
}
"""


def _compile(kind, source, label):
    shader = glCreateShader(kind)
    glShaderSource(shader, source)
    glCompileShader(shader)
    if not glGetShaderiv(shader, GL_COMPILE_STATUS):
        error = glGetShaderInfoLog(shader).decode()
        glDeleteShader(shader)
        raise RuntimeError(f"Error de compilación en {label}:\n{error}")
    return shader


def load_shader_program(vertex_src=VISUALISER_VERT, fragment_src=VISUALISER_FRAG):
    """
    Compila los shaders y los enlaza en un programa.
    Returns:
        int: El ID del programa de shader enlazado.
    Raises:
        RuntimeError: si falla la compilación o el enlazado.
    """
    vertex_shader = _compile(GL_VERTEX_SHADER, vertex_src, "Vertex Shader")
    fragment_shader = _compile(GL_FRAGMENT_SHADER, fragment_src, "Fragment Shader")

    shader_program = glCreateProgram()
    glAttachShader(shader_program, vertex_shader)
    glAttachShader(shader_program, fragment_shader)
    glLinkProgram(shader_program)

    # Una vez enlazados, los shaders individuales ya no son necesarios
    glDeleteShader(vertex_shader)
    glDeleteShader(fragment_shader)

    if not glGetProgramiv(shader_program, GL_LINK_STATUS):
        error = glGetProgramInfoLog(shader_program).decode()
        raise RuntimeError(f"Error de enlazado del programa de shaders:\n{error}")

    log.debug("Shaders compilados y enlazados correctamente")
    return shader_program
