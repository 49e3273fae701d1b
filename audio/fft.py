# audio/fft.py
# ============================================================================
# Procesamiento FFT (Fast Fourier Transform)
# ============================================================================
# Convierte un corte de muestras en su espectro complejo. El tamaño de la
# transformada es siempre una potencia de dos; los planes y las ventanas de
# cada tamaño se guardan en caché porque los bloques de captura se repiten
# casi siempre con la misma longitud.
# ============================================================================

import logging
import math
from dataclasses import dataclass

import numpy as np

log = logging.getLogger(__name__)


class FFTPlan:
    """Transformada directa reutilizable para un tamaño fijo."""

    def __init__(self, size):
        self.size = size

    def process(self, buffer):
        # Transformación "in place" sobre el array complejo recibido
        buffer[:] = np.fft.fft(buffer, n=self.size)
        return buffer


@dataclass(frozen=True)
class SpectralCacheEntry:
    plan: FFTPlan
    window: np.ndarray
    scale: float

    @property
    def size(self):
        return self.plan.size


class SpectralEngine:
    def __init__(self):
        # clave: potencia a la que se eleva 2 para obtener el tamaño
        self._cache = {}

    @property
    def cached_powers(self):
        return sorted(self._cache)

    def entry(self, power_of_two):
        """Devuelve (creándola la primera vez) la entrada de caché de 2**power."""
        entry = self._cache.get(power_of_two)
        if entry is None:
            size = 2 ** power_of_two
            log.info("Creando FFT de tamaño %d", size)
            # Ventana de Hamming: suaviza los bordes del corte y reduce el
            # "spectral leakage" del truncado rectangular.
            entry = SpectralCacheEntry(
                plan=FFTPlan(size),
                window=np.hamming(size),
                scale=math.sqrt(size),
            )
            self._cache[power_of_two] = entry
        return entry

    def transform(self, values):
        """
        Ventanea y transforma el mayor prefijo potencia de dos de `values`.
        Args:
            values (np.ndarray): muestras reales.
        Returns:
            tuple | None: (espectro complejo, factor de escala) o None si hay
            menos de 2 muestras.
        """
        if len(values) < 2:
            return None

        # floor(log2(n)) exacto en enteros
        power_of_two = len(values).bit_length() - 1
        entry = self.entry(power_of_two)

        # El resto de muestras que no cabe en la potencia de dos se descarta
        buffer = np.asarray(values[:entry.size], dtype=np.float64) * entry.window
        spectrum = entry.plan.process(buffer.astype(np.complex128))
        return spectrum, entry.scale
