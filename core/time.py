# core/time.py
# ============================================================================
# Sistema de Tiempo
# ============================================================================
# Control de FPS y cálculo del intervalo entre frames. Ese intervalo es el
# que se pide al gestor de buffers: cada frame consume exactamente el audio
# que transcurrió desde el anterior.
# ============================================================================

import pygame

# Un frame muy tardío (ventana arrastrada, suspensión) no debe pedir segundos
# de audio de golpe
MAX_INTERVAL = 0.25


class TimeManager:
    def __init__(self):
        self.clock = pygame.time.Clock()
        self.delta_time = 0.0
        self.start_time = pygame.time.get_ticks()

    def tick(self, fps):
        """
        Avanza el reloj y calcula el tiempo transcurrido desde el último frame.
        Args:
            fps (int): Frames por segundo objetivo.
        Returns:
            float: Delta time en segundos, acotado a MAX_INTERVAL.
        """
        self.delta_time = min(self.clock.tick(fps) / 1000.0, MAX_INTERVAL)
        return self.delta_time

    def get_fps(self):
        """Devuelve los FPS actuales."""
        return self.clock.get_fps()
