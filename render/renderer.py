# render/renderer.py
# ============================================================================
# Renderizador del Espectro (OpenGL Core Profile)
# ============================================================================
# Sube el espectro como textura 1D y dibuja la geometría del layout. El
# fragment shader muestrea la textura con la frecuencia de cada píxel.
# ============================================================================

import ctypes

import numpy as np
import pyrr
from OpenGL.GL import *

from . import shaders
from .layout import DEFAULT_QUAD, VERTEX_FLOATS, load_layout


class SpectrumRenderer:
    def __init__(self, ctx):
        self.ctx = ctx
        self.size = ctx.config.spectrum_size

        self.program = shaders.load_shader_program()
        self.u_projection_loc = glGetUniformLocation(self.program, "u_projection")
        self.u_spectrum_loc = glGetUniformLocation(self.program, "u_spectrum")

        # --- Geometría ---
        # Con un layout propio se conserva su proporción al redimensionar;
        # el rectángulo por defecto se estira a toda la ventana.
        if ctx.config.layout is not None:
            self.vertex_data = load_layout(ctx.config.layout)
            self.keep_aspect = True
        else:
            self.vertex_data = DEFAULT_QUAD
            self.keep_aspect = False
        self.vertex_count = len(self.vertex_data)

        self.vao = glGenVertexArrays(1)
        glBindVertexArray(self.vao)

        self.vbo = glGenBuffers(1)
        glBindBuffer(GL_ARRAY_BUFFER, self.vbo)
        glBufferData(GL_ARRAY_BUFFER, self.vertex_data.nbytes, self.vertex_data, GL_STATIC_DRAW)

        # 4 floats * 4 bytes por vértice
        stride = VERTEX_FLOATS * 4
        # Atributo 0: posición (vec2)
        glVertexAttribPointer(0, 2, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(0))
        glEnableVertexAttribArray(0)
        # Atributo 1: frecuencia (float)
        glVertexAttribPointer(1, 1, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(8))
        glEnableVertexAttribArray(1)
        # Atributo 2: amplitud (float)
        glVertexAttribPointer(2, 1, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(12))
        glEnableVertexAttribArray(2)

        glBindVertexArray(0)
        glBindBuffer(GL_ARRAY_BUFFER, 0)

        # --- Textura del espectro ---
        self.texture = glGenTextures(1)
        glBindTexture(GL_TEXTURE_1D, self.texture)
        glTexParameteri(GL_TEXTURE_1D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_1D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_1D, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
        glPixelStorei(GL_UNPACK_ALIGNMENT, 1)
        glTexImage1D(
            GL_TEXTURE_1D, 0, GL_R32F, self.size, 0, GL_RED, GL_FLOAT,
            np.zeros(self.size, dtype=np.float32),
        )
        glBindTexture(GL_TEXTURE_1D, 0)

        self.projection_matrix = None
        self.resize(ctx.W, ctx.H)

    def resize(self, w, h):
        """Actualiza el viewport y la proyección al cambiar el tamaño de ventana."""
        glViewport(0, 0, w, h)
        aspect = w / h if h > 0 else 1.0
        if self.keep_aspect and aspect >= 1.0:
            left, right, bottom, top = -aspect, aspect, -1.0, 1.0
        elif self.keep_aspect:
            left, right, bottom, top = -1.0, 1.0, -1.0 / aspect, 1.0 / aspect
        else:
            left, right, bottom, top = -1.0, 1.0, -1.0, 1.0
        self.projection_matrix = pyrr.matrix44.create_orthogonal_projection(
            left, right, bottom, top, -1.0, 1.0, dtype=np.float32,
        )

    def upload(self, spectrum):
        data = np.ascontiguousarray(spectrum, dtype=np.float32)
        glBindTexture(GL_TEXTURE_1D, self.texture)
        glTexSubImage1D(GL_TEXTURE_1D, 0, 0, self.size, GL_RED, GL_FLOAT, data)
        glBindTexture(GL_TEXTURE_1D, 0)

    def draw(self, spectrum=None):
        """
        Dibuja un frame. Sin espectro nuevo se redibuja el anterior, que
        sigue en la textura.
        """
        if spectrum is not None:
            self.upload(spectrum)

        glUseProgram(self.program)
        glUniformMatrix4fv(self.u_projection_loc, 1, GL_FALSE, self.projection_matrix)

        glActiveTexture(GL_TEXTURE0)
        glBindTexture(GL_TEXTURE_1D, self.texture)
        glUniform1i(self.u_spectrum_loc, 0)

        glBindVertexArray(self.vao)
        glDrawArrays(GL_TRIANGLES, 0, self.vertex_count)
        glBindVertexArray(0)
        glBindTexture(GL_TEXTURE_1D, 0)

    def cleanup(self):
        glDeleteTextures([self.texture])
        glDeleteBuffers(1, [self.vbo])
        glDeleteVertexArrays(1, [self.vao])
        glDeleteProgram(self.program)
