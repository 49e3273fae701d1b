# core/context.py
# ============================================================================
# Contexto Central
# ============================================================================
# Centraliza el estado de la aplicación y las referencias a los subsistemas
# para que se comuniquen sin importaciones circulares.
# ============================================================================

import numpy as np
from .profiler import Profiler


class Context:
    def __init__(self, config):
        self.config = config

        # Dimensiones de la ventana
        self.W = config.width
        self.H = config.height

        self.running = True

        # Último espectro recibido. Se reutiliza mientras no llegue uno nuevo.
        self.espectro = np.zeros(config.spectrum_size, dtype=np.float32)

        # Referencias a los subsistemas (se asignan en main.py)
        self.buffers = None
        self.audio = None
        self.renderer = None
        self.time = None
        self.profiler = Profiler()

    def update_spectrum(self, spectrum):
        """Guarda el espectro nuevo; devuelve False si no había datos."""
        if spectrum is None:
            return False
        np.copyto(self.espectro, spectrum)
        return True
