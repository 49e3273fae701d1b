# audio/manager.py
# ============================================================================
# Gestor de Buffers (Raíz de Composición del Análisis)
# ============================================================================
# Punto de encuentro entre los dos hilos:
# 1. Captura: llama a fill_buffer() cada vez que el backend entrega un bloque.
#    Es tiempo real, así que nunca espera: si el candado está ocupado o la
#    cola está llena, el bloque se descarta.
# 2. Render: llama a spectrum_for_interval() una vez por frame. Puede esperar
#    un instante por el candado; si no lo consigue, ese frame reutiliza el
#    espectro anterior.
# ============================================================================

import logging
import threading

from .buffer import ChunkStore
from .fft import SpectralEngine
from .spectrum import SpectrumRemapper

log = logging.getLogger(__name__)

# Espera máxima del hilo de render por el candado (segundos)
RENDER_LOCK_TIMEOUT = 0.004


class BufferManager:
    def __init__(self, config):
        self.config = config
        self.store = ChunkStore(target=config.buffer_target)
        # El motor y el remapeador solo se usan desde el hilo de render
        self.engine = SpectralEngine()
        self.remapper = SpectrumRemapper(config, config.spectrum_size)
        self._lock = threading.Lock()

        # Estadísticas para la consola
        self.contended = 0
        self.skipped_frames = 0

    @property
    def dropped(self):
        """Bloques descartados por cola llena o candado ocupado."""
        return self.store.dropped + self.contended

    def fill_buffer(self, samples, rate):
        if not self._lock.acquire(blocking=False):
            self.contended += 1
            return
        try:
            self.store.ingest(samples, rate)
        finally:
            self._lock.release()

    def spectrum_for_interval(self, duration):
        """
        Calcula el espectro de los próximos `duration` segundos de audio.
        Returns:
            np.ndarray | None: espectro de `spectrum_size` bandas, o None si
            no hay datos nuevos (el llamador reutiliza el frame anterior).
        """
        if not self._lock.acquire(timeout=RENDER_LOCK_TIMEOUT):
            self.skipped_frames += 1
            log.debug("Candado ocupado, se omite el frame")
            return None
        try:
            timed = self.store.take(duration)
        finally:
            self._lock.release()

        if len(timed) < 2:
            return None

        result = self.engine.transform(timed.values)
        if result is None:
            return None
        spectrum, scale = result
        return self.remapper.remap(spectrum, timed.effective_rate, scale)
