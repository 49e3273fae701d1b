# main.py
# ============================================================================
# Punto de Entrada Principal
# ============================================================================
# Orquesta los módulos (Core, Audio, Render) y ejecuta el loop principal.
# Cada frame pide al gestor de buffers el espectro del audio transcurrido
# desde el frame anterior.
# ============================================================================

import logging
import sys
import time

import pygame
from pygame.locals import DOUBLEBUF, OPENGL, RESIZABLE, VIDEORESIZE, QUIT, KEYDOWN, K_ESCAPE
from OpenGL.GL import glClear, glClearColor, GL_COLOR_BUFFER_BIT

from core.config import parse_args
from core.context import Context
from core.time import TimeManager
from audio.engine import AudioEngine
from audio.manager import BufferManager
from render.renderer import SpectrumRenderer

log = logging.getLogger("wmantle")


def list_devices(ctx):
    for dev in AudioEngine(ctx).get_devices():
        print(dev.name)


def main(argv=None):
    config, args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Crear contexto central
    ctx = Context(config)

    if args.list_devices:
        list_devices(ctx)
        return 0

    pygame.init()

    # Solicitar un contexto OpenGL 3.3 Core Profile
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_PROFILE_MASK, pygame.GL_CONTEXT_PROFILE_CORE)
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MAJOR_VERSION, 3)
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MINOR_VERSION, 3)

    pygame.display.set_caption("wmantle")
    pygame.display.set_mode((ctx.W, ctx.H), DOUBLEBUF | OPENGL | RESIZABLE)

    # Inicializar subsistemas inyectando el contexto
    ctx.time = TimeManager()
    ctx.buffers = BufferManager(config)
    ctx.audio = AudioEngine(ctx)
    ctx.renderer = SpectrumRenderer(ctx)

    if not ctx.audio.start():
        log.warning("Sin captura de audio: se mostrará un espectro vacío")

    glClearColor(0.0, 0.0, 0.0, 1.0)

    ultimo_print_debug = time.time()

    try:
        while ctx.running:
            # 1. Gestión de Tiempo
            dt = ctx.time.tick(config.fps)

            # 2. Procesamiento de Eventos
            for evt in pygame.event.get():
                if evt.type == QUIT:
                    ctx.running = False
                elif evt.type == KEYDOWN and evt.key == K_ESCAPE:
                    ctx.running = False
                elif evt.type == VIDEORESIZE:
                    ctx.W, ctx.H = evt.w, evt.h
                    pygame.display.set_mode((evt.w, evt.h), DOUBLEBUF | OPENGL | RESIZABLE)
                    ctx.renderer.resize(evt.w, evt.h)

            # 3. Análisis: el audio de los últimos dt segundos
            with ctx.profiler.region("audio_fft"):
                spectrum = ctx.buffers.spectrum_for_interval(dt)
                nuevo = ctx.update_spectrum(spectrum)

            # 4. Renderizado (sin datos nuevos se redibuja el frame anterior)
            glClear(GL_COLOR_BUFFER_BIT)
            with ctx.profiler.region("render"):
                ctx.renderer.draw(ctx.espectro if nuevo else None)

            pygame.display.flip()

            # 5. Profiling
            ahora = time.time()
            if ahora - ultimo_print_debug >= 1.0:
                fps = ctx.time.get_fps()
                res = ctx.profiler.get_averages()
                print(
                    f"FPS: {fps:<5.1f} | FFT: {res.get('audio_fft', 0):<5.2f}ms"
                    f" | Render: {res.get('render', 0):<5.2f}ms"
                    f" | Descartados: {ctx.buffers.dropped}"
                    f" | Frames omitidos: {ctx.buffers.skipped_frames}"
                )
                ultimo_print_debug = ahora
    finally:
        # Limpieza
        ctx.audio.stop()
        ctx.renderer.cleanup()
        pygame.quit()
        log.info("Sistema finalizado")

    return 0


if __name__ == "__main__":
    sys.exit(main())
